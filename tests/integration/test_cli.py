"""Integration tests for the summoning command line."""

import io
import sys
from pathlib import Path

import pytest
import structlog

from summoning.config import get_settings
from summoning.log import configure_logging
from summoning.main import build_parser, main

BUNDLED_BESTIARY = Path(__file__).parents[2] / "data" / "bestiary" / "core.yaml"


class TestParser:
    """Tests for argument parsing."""

    def test_command_required(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args([])

    def test_sheet_arguments(self):
        args = build_parser().parse_args(["sheet", "core.yaml", "--name", "Cave Rat"])
        assert args.command == "sheet"
        assert args.path == Path("core.yaml")
        assert args.name == "Cave Rat"


class TestSheetCommand:
    """Tests for printing sheets without a database."""

    def test_prints_every_monster(self, capsys):
        assert main(["sheet", str(BUNDLED_BESTIARY)]) == 0

        out = capsys.readouterr().out
        assert "Cave Rat (Level 1 Minion)" in out
        assert "Grave Warden (Level 4 Elite)" in out

    def test_single_monster(self, capsys):
        assert main(["sheet", str(BUNDLED_BESTIARY), "--name", "grave warden"]) == 0

        out = capsys.readouterr().out
        assert "Cave Rat" not in out
        assert "PPV: 3  MPV: 1" in out
        assert "Dodge: Roll 3 dice." in out

    def test_unknown_monster(self, capsys):
        assert main(["sheet", str(BUNDLED_BESTIARY), "--name", "Hydra"]) == 1
        assert "No monster named 'Hydra'" in capsys.readouterr().err

    def test_missing_file(self, tmp_path, capsys):
        assert main(["sheet", str(tmp_path / "missing.yaml")]) == 1
        assert "File not found" in capsys.readouterr().err


class TestDatabaseCommands:
    """Tests for commands backed by the test database."""

    def test_import_and_list(self, capsys):
        assert main(["init-db"]) == 0
        assert main(["import", str(BUNDLED_BESTIARY), "--campaign", "cli-campaign"]) == 0
        assert "Imported 2 monsters" in capsys.readouterr().out

        assert main(["list", "--campaign", "cli-campaign"]) == 0
        out = capsys.readouterr().out
        assert "Cave Rat" in out
        assert "Grave Warden" in out
        assert "CAMPAIGN" in out

    def test_list_hides_other_campaigns(self, capsys):
        assert main(["init-db"]) == 0
        capsys.readouterr()

        assert main(["list", "--campaign", "nobody-here"]) == 0
        assert "Grave Warden" not in capsys.readouterr().out


class TestLogging:
    """Tests for structlog configuration."""

    def test_logs_follow_replaced_stderr(self, monkeypatch):
        """Loggers write to the current stderr, not the one seen at setup."""
        configure_logging(get_settings())

        replacement = io.StringIO()
        monkeypatch.setattr(sys, "stderr", replacement)
        structlog.get_logger("summoning.test").info("stream_switched")

        assert "stream_switched" in replacement.getvalue()

    def test_logging_after_cli_run(self, capsys):
        """A CLI run leaves logging usable for later code."""
        assert main(["sheet", str(BUNDLED_BESTIARY), "--name", "Cave Rat"]) == 0
        capsys.readouterr()

        structlog.get_logger("summoning.test").info("after_cli")
        assert "after_cli" in capsys.readouterr().err
