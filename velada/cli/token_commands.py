"""
Token CLI commands: issue signed access tokens for local testing
"""
from datetime import timedelta

from velada.security.rbac import create_access_token


class TokenCommand:
    """Token CLI command handler."""

    def __init__(self, dry_run: bool = False):
        self.dry_run = dry_run

    def execute(self, args) -> int:
        if args.token_action == "issue":
            return self._issue(args)
        else:
            print("Error: Unknown token action")
            return 1

    def _issue(self, args) -> int:
        expires = timedelta(minutes=args.minutes) if args.minutes else None
        token = create_access_token(args.email, name=args.name, expires_delta=expires)
        print(token)
        return 0
