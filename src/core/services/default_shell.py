"""Login shell: offer to make the configured shell the user's default."""

from __future__ import annotations

import logging

from src.adapters.shell import command
from src.core.models.receipt import StepReceipt
from src.core.services.prompts import Confirm

logger = logging.getLogger(__name__)


def ensure_default_shell(
    shell_path: str,
    login_shell: str | None,
    confirm: Confirm,
) -> StepReceipt:
    """Run ``chsh -s`` when ``$SHELL`` is not ``shell_path`` and the user agrees.

    Never fatal: declining, a missing chsh, or a failing chsh only
    produce a skipped or failed receipt.
    """
    if login_shell == shell_path:
        return StepReceipt.skip(step="login-shell", subject=shell_path, reason="already default")

    if not confirm(f"Change your login shell to {shell_path}?"):
        logger.info("Keeping login shell %s", login_shell or "(unknown)")
        return StepReceipt.skip(step="login-shell", subject=shell_path, reason="declined")

    chsh = command.which("chsh")
    if chsh is None:
        logger.warning("chsh not found; set your login shell to %s manually", shell_path)
        return StepReceipt.failure(
            step="login-shell", subject=shell_path, error="chsh not found",
            metadata={"warning": True},
        )

    logger.info("Changing default shell to %s...", shell_path)
    r = command.run_command([chsh, "-s", shell_path], capture=False)
    if not r.ok:
        logger.warning("chsh failed (exit %d); login shell unchanged", r.returncode)
        return StepReceipt.failure(
            step="login-shell", subject=shell_path,
            error=f"chsh exited with code {r.returncode}",
            metadata={"warning": True},
        )
    return StepReceipt.success(step="login-shell", subject=shell_path, output="login shell changed")
