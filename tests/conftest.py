"""
Shared test fixtures and configuration.

``fake_system`` replaces the command runner so no test ever starts a real
program; ``make_settings`` builds a throwaway checkout and home directory.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable
from pathlib import Path

import pytest

from src.adapters.shell import command
from src.adapters.shell.command import CommandResult
from src.core.config.loader import build_settings
from src.core.models.config import BootstrapConfig
from src.core.models.settings import Settings

DEFAULT_PATH = ("/usr/bin", "/bin")


class FakeSystem:
    """A simulated PATH plus a recorder for every command run.

    Binaries are absolute paths.  ``which`` searches the simulated PATH,
    or the explicit ``path`` argument when given, like ``shutil.which``.
    Commands answer with the first registered handler whose prefix
    matches ``[basename(argv[0]), *argv[1:]]``, else succeed silently.
    """

    def __init__(self) -> None:
        self.path_dirs: list[str] = list(DEFAULT_PATH)
        self.binaries: set[str] = set()
        self.calls: list[list[str]] = []
        self._handlers: list[tuple[list[str], Callable[[list[str]], CommandResult]]] = []

    def add(self, name: str, directory: str = "/usr/bin") -> str:
        path = f"{directory}/{name}"
        self.binaries.add(path)
        return path

    def remove(self, name: str) -> None:
        self.binaries = {b for b in self.binaries if os.path.basename(b) != name}

    def on(
        self,
        prefix: list[str],
        result: CommandResult | Callable[[list[str]], CommandResult] | None = None,
        *,
        returncode: int = 0,
        stdout: str = "",
        stderr: str = "",
    ) -> None:
        """Register the answer for commands starting with ``prefix``."""
        if callable(result):
            handler = result
        elif result is None:
            def handler(argv: list[str]) -> CommandResult:
                return CommandResult(argv, returncode, stdout, stderr)
        else:
            fixed = result

            def handler(argv: list[str]) -> CommandResult:
                return fixed
        self._handlers.insert(0, (prefix, handler))

    def which(self, name: str, path: str | None = None) -> str | None:
        dirs = path.split(os.pathsep) if path is not None else self.path_dirs
        for directory in dirs:
            candidate = f"{directory}/{name}"
            if candidate in self.binaries:
                return candidate
        return None

    def run_command(self, argv, **kwargs) -> CommandResult:
        argv = [str(a) for a in argv]
        self.calls.append(argv)
        key = [os.path.basename(argv[0]), *argv[1:]]
        for prefix, handler in self._handlers:
            if key[: len(prefix)] == prefix:
                return handler(argv)
        return CommandResult(argv, 0)

    def commands(self, program: str) -> list[list[str]]:
        """Recorded calls whose argv[0] (or the one after sudo) is ``program``."""
        found = []
        for argv in self.calls:
            args = argv[1:] if argv[0] == "sudo" else argv
            if os.path.basename(args[0]) == program:
                found.append(argv)
        return found


@pytest.fixture
def fake_system(monkeypatch) -> FakeSystem:
    """Route ``command.which`` and ``command.run_command`` to a FakeSystem."""
    system = FakeSystem()
    monkeypatch.setattr(command, "which", system.which)
    monkeypatch.setattr(command, "run_command", system.run_command)
    monkeypatch.setattr(os, "geteuid", lambda: 1000)
    return system


@pytest.fixture
def checkout(tmp_path: Path) -> Path:
    """A minimal dotfiles checkout (not a git repository)."""
    root = tmp_path / "dotfiles"
    (root / "zsh" / "rc.d").mkdir(parents=True)
    (root / "zsh" / ".zshenv").write_text("export DOTFILES\n")
    (root / "zsh" / ".zshrc").write_text("for f in $ZDOTDIR/rc.d/*; do source $f; done\n")
    (root / "zsh" / "rc.d" / "10-path.zsh").write_text("path+=(~/bin)\n")
    (root / "zsh" / "rc.d" / "20-alias.zsh").write_text("alias ll='ls -l'\n")
    return root


@pytest.fixture
def home(tmp_path: Path) -> Path:
    path = tmp_path / "home"
    path.mkdir()
    return path


@pytest.fixture
def make_settings(checkout: Path, home: Path) -> Callable[..., Settings]:
    """Build Settings for the test checkout; keyword args override config."""

    def _make(environ: dict[str, str] | None = None, **config) -> Settings:
        env = {"HOME": str(home), "PATH": os.pathsep.join(DEFAULT_PATH)}
        env.update(environ or {})
        return build_settings(BootstrapConfig(**config), checkout, env)

    return _make


@pytest.fixture(autouse=True)
def _restore_logging():
    """CLI tests call setup_logging; keep root logger changes per-test."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
