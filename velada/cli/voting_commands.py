"""
Voting CLI commands: registry checks, vote results, winner management
"""
from velada.cli.db_commands import run_in_session
from velada.core.editions import get_registry
from velada.exceptions import VotingError
from velada.services.voting_service import VotingService
from velada.services.winner_service import WinnerService


def _confirm(prompt: str) -> bool:
    answer = input(f"{prompt} [y/N]: ")
    return answer.strip().lower() in ("y", "yes")


class RegistryCommand:
    """Registry CLI command handler."""

    def __init__(self, dry_run: bool = False):
        self.dry_run = dry_run

    def execute(self, args) -> int:
        if args.registry_action == "validate":
            return self._validate(args)
        elif args.registry_action == "show":
            return self._show(args)
        else:
            print("Error: Unknown registry action")
            return 1

    def _validate(self, args) -> int:
        registry = get_registry()
        validation = registry.validate()
        print(f"=== Registry Validation ({registry.total_combats} combats) ===")
        if validation.is_valid:
            print("✓ Registry is consistent")
            return 0
        for error in validation.errors:
            print(f"✗ {error}")
        return 1

    def _show(self, args) -> int:
        registry = get_registry()
        for combat in registry.combats:
            print(f"{combat.id:>3}  {combat.fighter1} vs {combat.fighter2}  ({combat.year or '-'})")
        return 0


class VotesCommand:
    """Vote CLI command handler."""

    def __init__(self, dry_run: bool = False):
        self.dry_run = dry_run
        self.voting = VotingService(get_registry())

    def execute(self, args) -> int:
        if args.votes_action == "results":
            return self._results(args)
        elif args.votes_action == "clear":
            return self._clear(args)
        else:
            print("Error: Unknown votes action")
            return 1

    def _results(self, args) -> int:
        if args.combat is not None:
            results = run_in_session(lambda db: self.voting.get_combat_vote_results(db, args.combat))
            if results is None:
                print(f"Error: Unknown combat {args.combat}")
                return 1
            print(f"=== Combat {results.combat_id} ===")
            print(f"{results.fighter1}: {results.fighter1_votes}")
            print(f"{results.fighter2}: {results.fighter2_votes}")
            print(f"Total: {results.total_votes}  Leader: {results.winning_fighter or '(tie)'}")
            return 0

        results = run_in_session(self.voting.get_vote_results)
        print("=== Vote Results ===")
        for result in results:
            print(f"{result.participant_id:<12} {result.vote_count:>6}")
        print(f"Total: {sum(result.vote_count for result in results)}")
        return 0

    def _clear(self, args) -> int:
        if self.dry_run:
            print("[DRY RUN] Would delete every vote")
            return 0
        if not args.force and not _confirm("Delete every vote?"):
            print("Aborted")
            return 1
        if not run_in_session(self.voting.clear_votes):
            print("Error: vote store delete failed (see logs)")
            return 1
        print("✓ All votes cleared")
        return 0


class WinnersCommand:
    """Winner CLI command handler."""

    def __init__(self, dry_run: bool = False):
        self.dry_run = dry_run
        self.winners = WinnerService(get_registry())

    def execute(self, args) -> int:
        if args.winners_action == "list":
            return self._list(args)
        elif args.winners_action == "set":
            return self._set(args)
        elif args.winners_action == "delete":
            return self._delete(args)
        elif args.winners_action == "clear":
            return self._clear(args)
        else:
            print("Error: Unknown winners action")
            return 1

    def _list(self, args) -> int:
        records = run_in_session(self.winners.get_all_winners)
        if not records:
            print("No winners recorded")
            return 0
        for record in records:
            print(f"Combat {record.combat_id}: {record.participant_id}  ({record.created_at:%Y-%m-%d %H:%M})")
        return 0

    def _set(self, args) -> int:
        if self.dry_run:
            print(f"[DRY RUN] Would set winner of combat {args.combat} to {args.participant}")
            return 0
        try:
            record = run_in_session(lambda db: self.winners.set_winner(db, args.combat, args.participant))
        except VotingError as e:
            print(f"Error: {e.message} ({e.code})")
            return 1
        print(f"✓ Combat {record.combat_id} winner: {record.participant_id}")
        return 0

    def _delete(self, args) -> int:
        if self.dry_run:
            print(f"[DRY RUN] Would reopen combat {args.combat}")
            return 0
        if not run_in_session(lambda db: self.winners.delete_winner(db, args.combat)):
            print("Error: winner store delete failed (see logs)")
            return 1
        print(f"✓ Combat {args.combat} reopened")
        return 0

    def _clear(self, args) -> int:
        if self.dry_run:
            print("[DRY RUN] Would delete every winner")
            return 0
        if not args.force and not _confirm("Delete every winner?"):
            print("Aborted")
            return 1
        if not run_in_session(self.winners.clear_all_winners):
            print("Error: winner store delete failed (see logs)")
            return 1
        print("✓ All winners cleared")
        return 0
