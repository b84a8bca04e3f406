"""Tests for the qa-engine command line."""

import asyncio

import pytest

from qa_engine import cli
from qa_engine.config import settings


@pytest.fixture(autouse=True)
def isolated_session(monkeypatch, tmp_path):
    monkeypatch.setattr(settings, "TOKEN_STORE_PATH", str(tmp_path / "session.json"))
    monkeypatch.setattr(settings, "AUTH_TOKEN", None)
    monkeypatch.setattr(settings, "LOG_FILE", None)


class TestParser:
    """Argument parsing."""

    def test_run_defaults(self):
        args = cli.build_parser().parse_args(["run"])

        assert args.system == "all"
        assert args.user_mode == "admin"
        assert args.live_sms is False
        assert args.export is None

    def test_global_options(self):
        args = cli.build_parser().parse_args(
            ["--base-url", "http://api.test", "--token", "t", "seed", "--system", "qr"]
        )

        assert args.base_url == "http://api.test"
        assert args.token == "t"
        assert args.system == "qr"

    def test_unknown_system_rejected(self):
        with pytest.raises(SystemExit):
            cli.build_parser().parse_args(["run", "--system", "billing"])

    def test_command_required(self):
        with pytest.raises(SystemExit):
            cli.build_parser().parse_args([])


class TestCommands:
    """Exit codes of whole commands."""

    def test_structure(self, capsys):
        with pytest.raises(SystemExit) as exc:
            cli.main(["structure"])

        assert exc.value.code == cli.EXIT_OK
        assert "## Core Application Files" in capsys.readouterr().out

    def test_run_without_session(self, capsys):
        args = cli.build_parser().parse_args(["--base-url", "http://api.test", "run"])

        code = asyncio.run(cli.execute(args))

        assert code == cli.EXIT_AUTH_REQUIRED
        assert "pass --token" in capsys.readouterr().out

    def test_seed_without_session_fails(self, capsys):
        args = cli.build_parser().parse_args(["--base-url", "http://api.test", "seed"])

        code = asyncio.run(cli.execute(args))

        assert code == cli.EXIT_FAILED
