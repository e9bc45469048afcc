"""
Git adapter: working-tree detection and submodule maintenance.

Uses the git CLI only.  Every operation returns a receipt; nothing here
raises for a failed git command.
"""

from __future__ import annotations

import logging
from pathlib import Path

from src.adapters.base import Adapter
from src.adapters.shell import command
from src.core.models.receipt import StepReceipt

logger = logging.getLogger(__name__)


class GitAdapter(Adapter):
    """Git operations needed by the submodule synchronizer."""

    @property
    def name(self) -> str:
        return "git"

    def is_available(self) -> bool:
        return command.which("git") is not None

    def is_work_tree(self, path: Path) -> bool:
        """Whether ``path`` is the top level of a git working tree.

        A checkout nested inside some other repository (a versioned home
        directory, say) does not count.
        """
        if not self.is_available():
            return False
        r = command.run_command(
            ["git", "-C", str(path), "rev-parse", "--show-toplevel"],
            timeout=15,
        )
        if not r.ok:
            return False
        try:
            return Path(r.stdout.strip()).resolve() == path.resolve()
        except OSError:
            return False

    def submodule_sync(self, path: Path) -> StepReceipt:
        return self._git(["submodule", "sync", "--recursive"], path, "sync")

    def submodule_update(self, path: Path) -> StepReceipt:
        return self._git(["submodule", "update", "--init", "--recursive"], path, "update")

    def submodule_clean(self, path: Path) -> StepReceipt:
        # Keep compiled plugins (*.zwc) written into the submodule trees
        return self._git(
            ["submodule", "foreach", "--recursive", "git", "clean", "-ffd", "-e", "*.zwc"],
            path,
            "clean",
        )

    # ── Helpers ─────────────────────────────────────────────────

    def _git(self, args: list[str], cwd: Path, subject: str) -> StepReceipt:
        """Run a git command and wrap the result in a receipt."""
        r = command.run_command(["git", *args], cwd=cwd)
        if r.ok:
            return StepReceipt.success(
                step="submodules",
                subject=subject,
                output=r.stdout.strip(),
                duration_ms=r.elapsed_ms,
                metadata={"command": command.format_argv(r.argv)},
            )
        return StepReceipt.failure(
            step="submodules",
            subject=subject,
            error=r.error_text,
            duration_ms=r.elapsed_ms,
            metadata={"command": command.format_argv(r.argv), "return_code": r.returncode},
        )
