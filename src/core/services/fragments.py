"""
Configuration fragments: listing, syntax checks and precompilation.

Fragments are the files in ``<zdotdir>/rc.d``.  ``.zshrc`` sources them
in lexical filename order, which is the only ordering guarantee the
dotfiles have: a later fragment may rely on variables set by an earlier
one.

Compilation runs zsh's ``zcompile`` on every fragment and every plugin
file.  It is an optimisation only.  Unreadable files are skipped, a file
that fails to compile is a warning, and nothing here ever fails the run.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from src.adapters.shell import command
from src.core.models.receipt import StepReceipt

logger = logging.getLogger(__name__)

COMPILED_SUFFIX = ".zwc"
PLUGIN_PATTERN = "*.zsh"

# $1 is the file; zcompile writes <file>.zwc next to it
_ZCOMPILE_SCRIPT = 'zcompile -- "$1"'


def _is_fragment(path: Path) -> bool:
    return (
        path.is_file()
        and not path.name.startswith(".")
        and not path.name.endswith(COMPILED_SUFFIX)
    )


def list_fragments(fragments_dir: Path) -> list[Path]:
    """Fragments in the order the shell sources them (lexical by name)."""
    if not fragments_dir.is_dir():
        return []
    return sorted(
        (p for p in fragments_dir.iterdir() if _is_fragment(p)),
        key=lambda p: p.name,
    )


def list_plugins(plugins_dir: Path) -> list[Path]:
    """Every ``*.zsh`` file below the plugins directory, sorted by path."""
    if not plugins_dir.is_dir():
        return []
    return sorted(p for p in plugins_dir.rglob(PLUGIN_PATTERN) if _is_fragment(p))


def is_compiled(path: Path) -> bool:
    """Whether ``path.zwc`` exists and is at least as new as ``path``."""
    compiled = path.with_name(path.name + COMPILED_SUFFIX)
    try:
        return compiled.stat().st_mtime >= path.stat().st_mtime
    except OSError:
        return False


@dataclass
class CompileReport:
    """Outcome of a compilation pass."""

    compiled: list[str] = field(default_factory=list)
    up_to_date: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def to_receipt(self) -> StepReceipt:
        return StepReceipt.success(
            step="compile",
            subject="fragments",
            output=(
                f"{len(self.compiled)} compiled, {len(self.up_to_date)} up to date, "
                f"{len(self.skipped)} skipped, {len(self.warnings)} warnings"
            ),
            metadata=self.to_dict(),
        )

    def to_dict(self) -> dict:
        return {
            "compiled": self.compiled,
            "up_to_date": self.up_to_date,
            "skipped": self.skipped,
            "warnings": self.warnings,
        }


def compile_files(files: list[Path], shell_path: str) -> CompileReport:
    """zcompile each file unless it is unreadable or already compiled."""
    report = CompileReport()
    for path in files:
        if not os.access(path, os.R_OK):
            logger.debug("Skipping unreadable %s", path)
            report.skipped.append(str(path))
            continue
        if is_compiled(path):
            report.up_to_date.append(str(path))
            continue
        r = command.run_command(
            [shell_path, "-c", _ZCOMPILE_SCRIPT, "zcompile", str(path)],
            timeout=30,
        )
        if r.ok:
            report.compiled.append(str(path))
        else:
            message = f"{path}: {r.error_text}"
            logger.warning("Could not compile %s", message)
            report.warnings.append(message)
    return report


def compile_fragments(
    fragments_dir: Path,
    plugins_dir: Path,
    shell_path: str,
) -> CompileReport:
    """Compile all fragments, then all plugin files."""
    files = list_fragments(fragments_dir) + list_plugins(plugins_dir)
    report = compile_files(files, shell_path)
    logger.info(
        "Compiled %d of %d shell files", len(report.compiled), len(files),
    )
    return report


def check_fragments(fragments_dir: Path, shell_path: str) -> list[StepReceipt]:
    """Parse each fragment with ``zsh -n`` (no execution).

    One receipt per fragment, in sourcing order.
    """
    receipts: list[StepReceipt] = []
    for path in list_fragments(fragments_dir):
        r = command.run_command([shell_path, "-n", str(path)], timeout=30)
        if r.ok:
            receipts.append(StepReceipt.success(step="check", subject=path.name))
        else:
            receipts.append(
                StepReceipt.failure(step="check", subject=path.name, error=r.error_text),
            )
    return receipts
