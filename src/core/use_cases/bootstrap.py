"""
Bootstrap use case: the full, strictly ordered setup run.

    tools → directories + links → submodules → login shell
          → fragment compilation → handoff disposition

Each step either completes or raises a ``BootstrapError``; the first
error ends the run and nothing already done is rolled back.  The result
never executes the shell itself: it carries a ``ShellHandoff`` for the
caller to perform.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from datetime import datetime

from src.adapters.registry import PackageManagerRegistry, default_registry
from src.adapters.vcs.git import GitAdapter
from src.core.errors import BootstrapError
from src.core.models.handoff import ShellHandoff
from src.core.models.receipt import StepReceipt
from src.core.models.settings import Settings
from src.core.services.default_shell import ensure_default_shell
from src.core.services.detection import manager_bin_dir
from src.core.services.fragments import compile_fragments as compile_shell_files
from src.core.services.handoff import build_handoff, resolve_shell
from src.core.services.installer import ensure_tools
from src.core.services.linker import link_dotfiles
from src.core.services.prompts import Confirm
from src.core.services.submodules import sync_submodules

logger = logging.getLogger(__name__)


@dataclass
class BootstrapResult:
    """Result of a bootstrap run."""

    settings: Settings | None = None
    steps: list[StepReceipt] = field(default_factory=list)
    manager: str | None = None
    handoff: ShellHandoff | None = None
    error: str | None = None
    error_kind: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def warnings(self) -> list[StepReceipt]:
        return [s for s in self.steps if s.failed and s.metadata.get("warning")]

    def to_dict(self) -> dict:
        result: dict = {
            "ok": self.ok,
            "checkout": str(self.settings.checkout) if self.settings else None,
            "package_manager": self.manager,
            "steps": [s.model_dump(mode="json") for s in self.steps],
        }
        if self.error:
            result["error"] = self.error
            result["error_kind"] = self.error_kind
        if self.handoff:
            result["handoff"] = self.handoff.to_dict()
        return result


def _extra_path(settings: Settings, registry: PackageManagerRegistry, manager: str | None) -> list[str]:
    """The manager's bin directory, when it is not on PATH yet."""
    bin_dir = manager_bin_dir(registry.get(manager)) if manager else None
    if not bin_dir:
        return []
    path_dirs = settings.base_env.get("PATH", "").split(os.pathsep)
    return [] if bin_dir in path_dirs else [bin_dir]


def run_bootstrap(
    settings: Settings,
    *,
    confirm: Confirm,
    registry: PackageManagerRegistry | None = None,
    git: GitAdapter | None = None,
    compile_fragments: bool | None = None,
    handoff: bool = True,
    set_login_shell: bool = True,
    now: datetime | None = None,
) -> BootstrapResult:
    """Run every bootstrap step in order.

    Args:
        settings: Resolved run settings.
        confirm: Answers every installation question.
        registry: Package managers to detect from (default: all supported).
        git: Git adapter for the submodule step.
        compile_fragments: Override ``settings.compile_fragments``.
        handoff: Build the shell handoff disposition at the end.
        set_login_shell: Offer ``chsh`` when the login shell differs.
        now: Clock for backup names (tests).

    Returns:
        BootstrapResult; ``error`` is set when a step failed.
    """
    registry = registry or default_registry()
    result = BootstrapResult(settings=settings)
    do_compile = settings.compile_fragments if compile_fragments is None else compile_fragments

    logger.info("Starting dotfiles setup from %s", settings.checkout)

    try:
        report = ensure_tools(settings, registry, confirm)
        result.manager = report.manager
        result.steps.extend(report.receipts)
        extra_path = _extra_path(settings, registry, report.manager)

        logger.info("Linking dotfiles...")
        result.steps.extend(link_dotfiles(settings, now))

        result.steps.extend(sync_submodules(settings.checkout, git))

        shell_path = resolve_shell(settings, extra_path)

        if set_login_shell:
            result.steps.append(ensure_default_shell(shell_path, settings.login_shell, confirm))

        if do_compile:
            compiled = compile_shell_files(settings.fragments_dir, settings.plugins_dir, shell_path)
            result.steps.append(compiled.to_receipt())

        if handoff:
            result.handoff = build_handoff(settings, extra_path)

    except BootstrapError as e:
        result.steps.extend(e.receipts)
        result.error = str(e)
        result.error_kind = e.kind
        return result

    logger.info("Dotfiles setup complete")
    return result
