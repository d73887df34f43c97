#!/usr/bin/env python3
"""
La Velada voting CLI

Usage:
    velada <command> [options]
    python -m velada.cli <command> [options]

Commands:
    db          Database operations (init, seed)
    registry    Combat registry checks (validate, show)
    votes       Vote operations (results, clear)
    winners     Winner operations (list, set, delete, clear)
    token       Issue access tokens for local testing

Environment:
    DATABASE_URL    SQLAlchemy async URL (default: sqlite+aiosqlite:///./velada.db)
    ADMIN_EMAILS    Comma-separated emails promoted to admin by `db seed`
    LOG_LEVEL       DEBUG|INFO|WARNING|ERROR
"""
import sys
import argparse
import logging
from typing import Optional

from velada import __version__
from velada.cli.db_commands import DbCommand
from velada.cli.voting_commands import RegistryCommand, VotesCommand, WinnersCommand
from velada.cli.token_commands import TokenCommand


def setup_logging(level: str = "INFO") -> None:
    """Configure logging."""
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )


def create_parser() -> argparse.ArgumentParser:
    """Create CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="velada",
        description="La Velada combat voting CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s db init
  %(prog)s db seed --demo-users 50
  %(prog)s votes results --combat 3
  %(prog)s winners set --combat 7 --participant westcol
  %(prog)s token issue --email admin@example.com --name Admin
        """
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}"
    )

    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: WARNING)"
    )

    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show what would be done without executing"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Database commands
    db_parser = subparsers.add_parser("db", help="Database operations")
    db_subparsers = db_parser.add_subparsers(dest="db_action")

    db_subparsers.add_parser("init", help="Create missing tables")

    seed_parser = db_subparsers.add_parser("seed", help="Seed admins (and optional demo votes)")
    seed_parser.add_argument("--demo-users", type=int, default=0, help="Demo users to create, each voting every combat")

    # Registry commands
    registry_parser = subparsers.add_parser("registry", help="Combat registry")
    registry_subparsers = registry_parser.add_subparsers(dest="registry_action")

    registry_subparsers.add_parser("validate", help="Check combat data for inconsistencies")
    registry_subparsers.add_parser("show", help="List combats of the active edition")

    # Vote commands
    votes_parser = subparsers.add_parser("votes", help="Vote operations")
    votes_subparsers = votes_parser.add_subparsers(dest="votes_action")

    results_parser = votes_subparsers.add_parser("results", help="Show vote totals")
    results_parser.add_argument("--combat", "-c", type=int, help="Only this combat")

    clear_votes_parser = votes_subparsers.add_parser("clear", help="Delete every vote")
    clear_votes_parser.add_argument("--force", action="store_true", help="Skip confirmation")

    # Winner commands
    winners_parser = subparsers.add_parser("winners", help="Winner operations")
    winners_subparsers = winners_parser.add_subparsers(dest="winners_action")

    winners_subparsers.add_parser("list", help="List recorded winners")

    set_parser = winners_subparsers.add_parser("set", help="Record (or replace) a combat winner")
    set_parser.add_argument("--combat", "-c", type=int, required=True, help="Combat ID")
    set_parser.add_argument("--participant", "-p", required=True, help="Winning participant")

    delete_parser = winners_subparsers.add_parser("delete", help="Reopen a combat")
    delete_parser.add_argument("--combat", "-c", type=int, required=True, help="Combat ID")

    clear_winners_parser = winners_subparsers.add_parser("clear", help="Delete every winner")
    clear_winners_parser.add_argument("--force", action="store_true", help="Skip confirmation")

    # Token commands
    token_parser = subparsers.add_parser("token", help="Access tokens")
    token_subparsers = token_parser.add_subparsers(dest="token_action")

    issue_parser = token_subparsers.add_parser("issue", help="Issue a signed access token")
    issue_parser.add_argument("--email", "-e", required=True, help="User email (token subject)")
    issue_parser.add_argument("--name", "-n", help="Display name, needed to create a new user")
    issue_parser.add_argument("--minutes", type=int, help="Lifetime in minutes")

    return parser


def main(args: Optional[list] = None) -> int:
    """Main entry point."""
    parser = create_parser()
    parsed = parser.parse_args(args)

    if not parsed.command:
        parser.print_help()
        return 1

    setup_logging(parsed.log_level)

    command_map = {
        "db": DbCommand,
        "registry": RegistryCommand,
        "votes": VotesCommand,
        "winners": WinnersCommand,
        "token": TokenCommand,
    }

    if parsed.command in command_map:
        handler = command_map[parsed.command](dry_run=parsed.dry_run)
        return handler.execute(parsed)

    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
