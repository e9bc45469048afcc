"""
Tests for observability: logging setup and the error taxonomy.
"""

import logging
from pathlib import Path

from src.core.errors import (
    BootstrapError,
    FilesystemError,
    HandoffError,
    InstallationError,
    MissingDependencyError,
    VersionControlError,
)
from src.core.observability.logging_config import _parse_level, setup_logging

log = logging.getLogger("src.test")


class TestSetupLogging:
    def test_severity_tags(self, capsys):
        setup_logging("INFO")
        log.info("Linked ~/.zshenv")
        log.warning("Backed up ~/.zshenv")
        log.error("Missing required tools")
        err = capsys.readouterr().err.splitlines()
        assert err == [
            "[info] Linked ~/.zshenv",
            "[warn] Backed up ~/.zshenv",
            "[error] Missing required tools",
        ]

    def test_level_filters(self, capsys):
        setup_logging("ERROR")
        log.info("hidden")
        log.warning("hidden")
        assert capsys.readouterr().err == ""

    def test_debug_has_location(self, capsys):
        setup_logging("DEBUG")
        log.debug("probe")
        line = capsys.readouterr().err.strip()
        assert "[debug] src.test:" in line
        assert line.endswith("probe")

    def test_nothing_on_stdout(self, capsys):
        setup_logging("DEBUG")
        log.error("boom")
        assert capsys.readouterr().out == ""

    def test_log_file(self, tmp_path: Path, capsys):
        path = tmp_path / "dotstrap.log"
        setup_logging("ERROR", log_file=str(path), log_file_level="DEBUG")
        log.debug("to the file only")
        logging.getLogger().handlers[-1].flush()
        assert "to the file only" in path.read_text()
        assert capsys.readouterr().err == ""

    def test_parse_level(self):
        assert _parse_level("debug") == logging.DEBUG
        assert _parse_level(None) == logging.INFO
        assert _parse_level("chatty") == logging.INFO


class TestErrors:
    def test_kinds(self):
        assert MissingDependencyError({}).kind == "missing-dependency"
        assert InstallationError("x").kind == "installation-failure"
        assert FilesystemError("x").kind == "filesystem"
        assert VersionControlError("x").kind == "version-control"
        assert HandoffError("x").kind == "handoff"

    def test_all_are_bootstrap_errors(self):
        for cls in (InstallationError, FilesystemError, VersionControlError, HandoffError):
            assert issubclass(cls, BootstrapError)

    def test_remediation_in_message(self):
        error = InstallationError("git failed", remediation="https://git-scm.com/downloads")
        assert str(error) == "git failed (see https://git-scm.com/downloads)"

    def test_missing_lists_every_tool(self):
        error = MissingDependencyError({"git": "installation declined", "zsh": "installation declined"})
        assert str(error) == (
            "Missing required tools: git: installation declined; zsh: installation declined"
        )
