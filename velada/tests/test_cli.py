"""
CLI parsing and the commands that need no database
"""
from jose import jwt

from velada.cli import create_parser, main
from velada.config import settings


class TestCLIParser:

    def test_winners_set_parsing(self):
        args = create_parser().parse_args(["winners", "set", "--combat", "7", "--participant", "westcol"])

        assert args.command == "winners"
        assert args.winners_action == "set"
        assert args.combat == 7
        assert args.participant == "westcol"

    def test_votes_results_parsing(self):
        args = create_parser().parse_args(["votes", "results", "-c", "3"])
        assert args.votes_action == "results"
        assert args.combat == 3

    def test_dry_run_flag(self):
        args = create_parser().parse_args(["--dry-run", "votes", "clear"])
        assert args.dry_run is True
        assert args.force is False

    def test_no_command_prints_help(self, capsys):
        assert main([]) == 1
        assert "usage" in capsys.readouterr().out


class TestCommands:

    def test_registry_validate(self, capsys):
        assert main(["registry", "validate"]) == 0
        assert "consistent" in capsys.readouterr().out

    def test_registry_show(self, capsys):
        assert main(["registry", "show"]) == 0
        assert "grefg vs westcol" in capsys.readouterr().out

    def test_token_issue(self, capsys):
        assert main(["token", "issue", "--email", "Admin@Example.com", "--name", "Admin"]) == 0
        token = capsys.readouterr().out.strip()

        payload = jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
        assert payload["sub"] == "admin@example.com"
        assert payload["name"] == "Admin"

    def test_dry_run_does_not_touch_database(self, capsys):
        assert main(["--dry-run", "winners", "clear"]) == 0
        assert "[DRY RUN]" in capsys.readouterr().out
