"""
Shell handoff: the last step of a bootstrap run.

``build_handoff`` resolves the shell and returns a ``ShellHandoff``
describing the process to become.  Only ``perform_handoff``, called by
the CLI driver, actually replaces the process.  There is no fallback to
another shell: a missing shell is a ``HandoffError``.
"""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path
from typing import NoReturn

from src.adapters.shell import command
from src.core.errors import HandoffError
from src.core.models.handoff import ShellHandoff
from src.core.models.settings import Settings

logger = logging.getLogger(__name__)


def resolve_shell(settings: Settings, extra_path: list[str] | None = None) -> str:
    """Absolute path of the configured shell.

    Raises:
        HandoffError: The shell is not on PATH (nor in ``extra_path``).
    """
    found = command.which(settings.shell)
    if not found and extra_path:
        found = command.which(settings.shell, path=os.pathsep.join(extra_path))
    if not found:
        raise HandoffError(
            f"Shell not found: {settings.shell} is not installed or not on PATH",
        )
    return found


def build_handoff(settings: Settings, extra_path: list[str] | None = None) -> ShellHandoff:
    """Describe the interactive shell that takes over the session."""
    shell_path = resolve_shell(settings, extra_path)

    env = settings.shell_environment()
    if extra_path:
        current = env.get("PATH", "")
        missing = [d for d in extra_path if d not in current.split(os.pathsep)]
        if missing:
            env["PATH"] = os.pathsep.join([*missing, current] if current else missing)

    return ShellHandoff(
        executable=shell_path,
        argv=[Path(shell_path).name, "-i"],
        env=env,
    )


def perform_handoff(handoff: ShellHandoff) -> NoReturn:
    """Replace the current process with the shell.  Never returns.

    Raises:
        HandoffError: exec failed (the binary vanished or is not executable).
    """
    logger.info("Handing off to %s", handoff.executable)
    sys.stdout.flush()
    sys.stderr.flush()
    try:
        os.execve(handoff.executable, handoff.argv, handoff.env)
    except OSError as e:
        raise HandoffError(f"Cannot start {handoff.executable}: {e}") from e
