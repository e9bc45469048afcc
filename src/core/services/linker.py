"""
Filesystem linker: standard directories and dotfile symlinks.

Guarantees, for each ``LinkSpec`` after a successful run: the target is a
symlink pointing at the source.  Anything that was in the way is either
an old symlink (removed) or user data (renamed aside to
``<target>.bak.<timestamp>``).  User data is never overwritten.

Re-running on an already linked home directory changes nothing.
"""

from __future__ import annotations

import logging
import os
from datetime import datetime
from pathlib import Path

from src.core.errors import FilesystemError
from src.core.models.receipt import StepReceipt
from src.core.models.settings import Settings
from src.core.models.tool import LinkSpec

logger = logging.getLogger(__name__)

BACKUP_TIMESTAMP_FORMAT = "%Y%m%d_%H%M%S"


def ensure_directories(directories: list[Path]) -> list[StepReceipt]:
    """Create each directory (with parents) unless it already exists.

    Raises:
        FilesystemError: A directory could not be created.
    """
    receipts: list[StepReceipt] = []
    for directory in directories:
        if directory.is_dir():
            receipts.append(StepReceipt.skip(step="directories", subject=str(directory)))
            continue
        try:
            directory.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise FilesystemError(
                f"Cannot create directory {directory}: {e}", receipts=receipts,
            ) from e
        logger.info("Created %s", directory)
        receipts.append(StepReceipt.success(step="directories", subject=str(directory)))
    return receipts


def backup_path(path: Path, now: datetime | None = None) -> Path:
    """A free ``<path>.bak.<YYYYmmdd_HHMMSS>`` name next to ``path``."""
    stamp = (now or datetime.now()).strftime(BACKUP_TIMESTAMP_FORMAT)
    candidate = path.with_name(f"{path.name}.bak.{stamp}")
    counter = 1
    while candidate.exists() or candidate.is_symlink():
        candidate = path.with_name(f"{path.name}.bak.{stamp}.{counter}")
        counter += 1
    return candidate


def link_target(path: Path) -> Path:
    """Absolute, normalized destination of the symlink at ``path``."""
    raw = os.readlink(path)
    return Path(os.path.normpath(os.path.join(path.parent, raw)))


def is_linked(spec: LinkSpec) -> bool:
    """Whether ``spec.target`` already points at ``spec.source``."""
    if not spec.target.is_symlink():
        return False
    return link_target(spec.target) == Path(os.path.normpath(spec.source))


def link(spec: LinkSpec, now: datetime | None = None) -> StepReceipt:
    """Create or repair one symlink.

    Raises:
        FilesystemError: The source is missing, or backup / removal /
            creation failed.
    """
    source, target = spec.source, spec.target

    if is_linked(spec):
        logger.info("%s already linked to %s", target, source)
        return StepReceipt.skip(step="link", subject=str(target), reason="already linked")

    if not source.exists():
        raise FilesystemError(f"Link source does not exist: {source}")

    metadata: dict = {"source": str(source)}

    if target.is_symlink():
        previous = os.readlink(target)
        try:
            target.unlink()
        except OSError as e:
            raise FilesystemError(f"Cannot remove stale symlink {target}: {e}") from e
        logger.info("Removed symlink %s (pointed at %s)", target, previous)
        metadata["replaced_link"] = previous
    elif target.exists():
        backup = backup_path(target, now)
        try:
            target.rename(backup)
        except OSError as e:
            raise FilesystemError(f"Cannot back up {target} to {backup}: {e}") from e
        logger.warning("Backed up existing %s → %s", target, backup)
        metadata["backup"] = str(backup)

    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.symlink_to(source)
    except OSError as e:
        raise FilesystemError(f"Cannot link {target} → {source}: {e}") from e

    logger.info("Linked %s → %s", target, source)
    return StepReceipt.success(
        step="link",
        subject=str(target),
        output=f"{target} → {source}",
        metadata=metadata,
    )


def zdotdir_already_set(settings: Settings) -> bool:
    """Whether the startup ZDOTDIR already names this checkout's zdotdir."""
    if not settings.current_zdotdir:
        return False
    current = Path(settings.current_zdotdir).expanduser().resolve()
    return current == settings.zdotdir.resolve()


def link_dotfiles(settings: Settings, now: datetime | None = None) -> list[StepReceipt]:
    """Create standard directories, then every configured symlink."""
    receipts = ensure_directories(settings.directories())

    if zdotdir_already_set(settings):
        logger.info("ZDOTDIR already points at %s, skipping links", settings.zdotdir)
        receipts.extend(
            StepReceipt.skip(step="link", subject=str(spec.target), reason="ZDOTDIR already set")
            for spec in settings.links
        )
        return receipts

    for spec in settings.links:
        try:
            receipts.append(link(spec, now))
        except FilesystemError as e:
            e.receipts = receipts + e.receipts
            raise
    return receipts
