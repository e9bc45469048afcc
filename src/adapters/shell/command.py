"""
Shell command runner: the single place external programs are started.

Every adapter and service calls ``command.run_command`` and
``command.which`` through this module, so tests can replace both with
monkeypatch and never touch the real system.
"""

from __future__ import annotations

import logging
import os
import shlex
import shutil
import subprocess
import time
from collections.abc import Sequence
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CommandResult:
    argv: list[str]
    returncode: int
    stdout: str = ""
    stderr: str = ""
    elapsed_ms: int = 0

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    @property
    def error_text(self) -> str:
        """Best available failure description."""
        return self.stderr.strip() or f"Command exited with code {self.returncode}"


def format_argv(argv: Sequence[str]) -> str:
    return " ".join(shlex.quote(a) for a in argv)


def which(name: str, path: str | None = None) -> str | None:
    """Absolute path of ``name`` on PATH (or on ``path``), or None."""
    return shutil.which(name, path=path)


def run_command(
    argv: Sequence[str],
    *,
    cwd: str | os.PathLike[str] | None = None,
    capture: bool = True,
    timeout: int | None = None,
) -> CommandResult:
    """Run a command and return its result.  Never raises for command failure.

    Args:
        argv: Command and arguments.
        cwd: Working directory.
        capture: Capture stdout/stderr.  Installers run with ``capture=False``
            so sudo prompts and progress reach the terminal.
        timeout: Seconds before giving up.  None waits forever.

    Returns:
        CommandResult; a missing executable is returncode 127 and a timeout
        is returncode 124, matching the shell conventions.
    """
    argv_list = [str(a) for a in argv]
    logger.debug("CMD %s", format_argv(argv_list))

    start = time.monotonic()
    try:
        p = subprocess.run(
            argv_list,
            cwd=str(cwd) if cwd is not None else None,
            text=True,
            capture_output=capture,
            timeout=timeout,
        )
    except FileNotFoundError as e:
        return CommandResult(argv=argv_list, returncode=127, stderr=str(e))
    except subprocess.TimeoutExpired:
        return CommandResult(
            argv=argv_list,
            returncode=124,
            stderr=f"Command timed out after {timeout}s",
        )
    elapsed_ms = int((time.monotonic() - start) * 1000)

    stdout = p.stdout or ""
    stderr = p.stderr or ""
    if stdout:
        logger.debug("STDOUT %s", stdout.strip()[-2000:])
    if stderr:
        logger.debug("STDERR %s", stderr.strip()[-2000:])

    return CommandResult(
        argv=argv_list,
        returncode=p.returncode,
        stdout=stdout,
        stderr=stderr,
        elapsed_ms=elapsed_ms,
    )
