"""
Submodule synchronizer: keep nested checkouts in step with the parent.

Only acts on a git working tree.  A standalone copy of the dotfiles (a
tarball, say) is supported and simply skipped.

    sync    → fatal on failure
    update  → fatal on failure
    clean   → warning only
"""

from __future__ import annotations

import logging
from pathlib import Path

from src.adapters.vcs.git import GitAdapter
from src.core.errors import VersionControlError
from src.core.models.receipt import StepReceipt

logger = logging.getLogger(__name__)


def sync_submodules(checkout: Path, git: GitAdapter | None = None) -> list[StepReceipt]:
    """Sync, init/update and clean all submodules of ``checkout``.

    Raises:
        VersionControlError: git is missing for a repository checkout, or
            sync/update failed.
    """
    git = git or GitAdapter()

    # .git is a directory for clones and a file for worktrees
    if not (checkout / ".git").exists():
        logger.info("%s is not a git checkout, skipping submodules", checkout)
        return [StepReceipt.skip(step="submodules", subject=str(checkout), reason="not a git checkout")]

    if not git.is_available():
        raise VersionControlError(
            f"{checkout} is a git repository but git is not installed",
            remediation="https://git-scm.com/downloads",
        )

    if not git.is_work_tree(checkout):
        logger.info("%s is not a git working tree, skipping submodules", checkout)
        return [StepReceipt.skip(step="submodules", subject=str(checkout), reason="not a git checkout")]

    logger.info("Syncing submodules...")
    receipts: list[StepReceipt] = []

    for operation in (git.submodule_sync, git.submodule_update):
        receipt = operation(checkout)
        receipts.append(receipt)
        if receipt.failed:
            raise VersionControlError(
                f"git submodule {receipt.subject} failed: {receipt.error}",
                receipts=receipts,
            )

    clean = git.submodule_clean(checkout)
    if clean.failed:
        logger.warning("Cleaning submodules failed: %s", clean.error)
        clean.metadata["warning"] = True
    receipts.append(clean)

    logger.info("Submodules up to date")
    return receipts
