"""
Adapter base: the contract between services and external tools.

Services never run a package manager or git directly; they go through
an adapter.  Adapters NEVER raise for tool failures.  Failures come back
as a failed ``StepReceipt``.
"""

from __future__ import annotations

import logging
import os
import re
from abc import ABC, abstractmethod

from src.adapters.shell import command
from src.core.models.receipt import StepReceipt

logger = logging.getLogger(__name__)


class Adapter(ABC):
    """Abstract base class for all adapters."""

    @property
    @abstractmethod
    def name(self) -> str:
        """The adapter identifier (e.g., 'apt', 'brew', 'git')."""

    @abstractmethod
    def is_available(self) -> bool:
        """Check if this adapter's underlying tool is available.

        Should be fast and never raise.
        """

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r}>"


class PackageManager(Adapter):
    """One OS package manager.

    Subclasses set ``probe_command`` (the executable whose presence on
    PATH means "this manager is usable") and implement
    ``install_commands``.

    To add a package manager:
        1. Subclass PackageManager
        2. Implement name and install_commands
        3. Register it in ``src.adapters.registry.default_registry``
    """

    probe_command: str = ""
    needs_root: bool = True
    version_pattern: str = r"(\d+\.\d+(?:\.\d+)?)"

    def probe(self) -> str | None:
        """Path of the probe command on PATH, or None."""
        return command.which(self.probe_command or self.name)

    def is_available(self) -> bool:
        return self.probe() is not None

    def executable(self) -> str:
        """What to put in argv[0] when running this manager."""
        return self.probe() or self.probe_command or self.name

    @abstractmethod
    def install_commands(self, package: str) -> list[list[str]]:
        """Commands that install ``package``, run in order (without sudo)."""

    def version(self) -> str | None:
        """Manager version string, if cheaply available."""
        if not self.is_available():
            return None
        r = command.run_command([self.executable(), "--version"], timeout=10)
        if not r.ok:
            return None
        match = re.search(self.version_pattern, r.stdout + r.stderr)
        return match.group(1) if match else None

    def _privileged(self, argv: list[str]) -> list[str]:
        """Prefix ``argv`` with sudo unless root already."""
        if not self.needs_root or os.geteuid() == 0:
            return argv
        return ["sudo", *argv]

    def install(self, package: str) -> StepReceipt:
        """Install ``package``, streaming output to the terminal."""
        for argv in self.install_commands(package):
            argv = self._privileged(argv)
            logger.info("Running %s", command.format_argv(argv))
            r = command.run_command(argv, capture=False)
            if not r.ok:
                return StepReceipt.failure(
                    step="install",
                    subject=package,
                    error=f"{command.format_argv(argv)} failed (exit {r.returncode})",
                    duration_ms=r.elapsed_ms,
                    metadata={"manager": self.name, "return_code": r.returncode},
                )
        return StepReceipt.success(
            step="install",
            subject=package,
            output=f"installed {package} with {self.name}",
            metadata={"manager": self.name},
        )
