"""
Tool installer: make sure every required tool is present.

For each ``ToolRequirement``, in configured order:

1. Present → log it (with version) and do nothing else.
2. Absent → without a usable package manager (or a package for this
   manager) the tool is *unavailable*; otherwise ask for consent.
3. Consent → install through the detected manager, then check again.
   Still absent afterwards is an installation *failure*.

The package manager itself is special: when none is detected, it can be
installed by fetching its official bootstrap script over HTTPS with curl
and running it.  That happens at most once per run and is never retried.

``ensure_tools`` evaluates every tool before failing, so one run reports
everything that is missing.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Literal

from src.adapters.base import PackageManager
from src.adapters.registry import PackageManagerRegistry
from src.adapters.shell import command
from src.core.errors import InstallationError, MissingDependencyError
from src.core.models.receipt import StepReceipt
from src.core.models.settings import Settings
from src.core.models.tool import ToolRequirement
from src.core.services.detection import detect_package_manager, find_tool, get_tool_version
from src.core.services.prompts import Confirm

logger = logging.getLogger(__name__)

OutcomeStatus = Literal["present", "installed", "declined", "unavailable", "failed"]


@dataclass
class ToolOutcome:
    """What happened to one required tool."""

    name: str
    status: OutcomeStatus
    path: str | None = None
    version: str | None = None
    reason: str = ""
    remediation: str = ""
    receipts: list[StepReceipt] = field(default_factory=list)

    @property
    def satisfied(self) -> bool:
        return self.status in ("present", "installed")

    def to_receipt(self) -> StepReceipt:
        metadata = {"outcome": self.status, "path": self.path, "version": self.version}
        if self.status == "present":
            label = f"{self.version}" if self.version else "present"
            return StepReceipt.skip(step="tools", subject=self.name, reason=label, metadata=metadata)
        if self.status == "installed":
            return StepReceipt.success(
                step="tools", subject=self.name, output="installed", metadata=metadata,
            )
        metadata["remediation"] = self.remediation
        return StepReceipt.failure(
            step="tools", subject=self.name, error=self.reason, metadata=metadata,
        )


@dataclass
class InstallReport:
    """Outcome of ``ensure_tools``."""

    manager: str | None = None
    outcomes: list[ToolOutcome] = field(default_factory=list)

    @property
    def missing(self) -> dict[str, str]:
        return {o.name: o.reason for o in self.outcomes if not o.satisfied}

    @property
    def receipts(self) -> list[StepReceipt]:
        return [o.to_receipt() for o in self.outcomes]


def _present(
    req: ToolRequirement,
    path: str,
    manager: PackageManager | None,
    status: OutcomeStatus = "present",
) -> ToolOutcome:
    version = get_tool_version(req, path, manager)
    verb = "is already installed" if status == "present" else "installed"
    if version:
        logger.info("%s %s (%s)", req.display_name, verb, version)
    else:
        logger.info("%s %s", req.display_name, verb)
    return ToolOutcome(name=req.name, status=status, path=path, version=version)


def install_tool(
    req: ToolRequirement,
    manager: PackageManager | None,
    confirm: Confirm,
) -> ToolOutcome:
    """Ensure one binary tool is present, installing it with consent."""
    path = find_tool(req, manager)
    if path:
        return _present(req, path, manager)

    logger.info("%s not found", req.display_name)

    if manager is None:
        reason = "no supported package manager to install it with"
        logger.error("Cannot install %s: %s", req.display_name, reason)
        return ToolOutcome(
            name=req.name, status="unavailable", reason=reason, remediation=req.docs_url,
        )

    package = req.package_for(manager.name)
    if not package:
        reason = f"{manager.name} has no package for {req.name}"
        logger.error("Cannot install %s: %s", req.display_name, reason)
        return ToolOutcome(
            name=req.name, status="unavailable", reason=reason, remediation=req.docs_url,
        )

    if not confirm(f"Install {req.display_name} with {manager.name}?"):
        logger.warning("Skipped installing %s (declined)", req.display_name)
        return ToolOutcome(
            name=req.name, status="declined", reason="installation declined",
            remediation=req.docs_url,
        )

    receipt = manager.install(package)
    found = find_tool(req, manager)
    if found:
        outcome = _present(req, found, manager, status="installed")
        outcome.receipts.append(receipt)
        return outcome

    reason = receipt.error or f"{req.executable or req.name} still not found after install"
    logger.error(
        "Installing %s failed: %s. See %s", req.display_name, reason, req.docs_url,
    )
    return ToolOutcome(
        name=req.name,
        status="failed",
        reason=reason,
        remediation=req.docs_url,
        receipts=[receipt],
    )


def bootstrap_package_manager(
    req: ToolRequirement,
    registry: PackageManagerRegistry,
    confirm: Confirm,
) -> tuple[ToolOutcome, PackageManager | None]:
    """Install the package manager from its official bootstrap script.

    Returns the outcome and, on success, the now-usable manager.
    """
    target = req.bootstrap_manager
    url = req.bootstrap_url
    if not target or not url:
        return ToolOutcome(
            name=req.name, status="unavailable",
            reason="no package manager found and no bootstrap installer configured",
            remediation=req.docs_url,
        ), None

    curl = command.which("curl")
    if curl is None:
        reason = f"curl is required to download the {target} installer"
        logger.error("Cannot install %s: %s", target, reason)
        return ToolOutcome(
            name=req.name, status="unavailable", reason=reason, remediation=req.docs_url,
        ), None

    if not confirm(f"No package manager found. Install {target} from {url}?"):
        logger.warning("Skipped installing %s (declined)", target)
        return ToolOutcome(
            name=req.name, status="declined", reason="installation declined",
            remediation=req.docs_url,
        ), None

    logger.info("Downloading %s installer from %s", target, url)
    fetched = command.run_command(
        [curl, "--proto", "=https", "--tlsv1.2", "-fsSL", url],
        timeout=300,
    )
    if not fetched.ok or not fetched.stdout.strip():
        reason = f"download failed: {fetched.error_text}"
        logger.error("Installing %s failed: %s. See %s", target, reason, req.docs_url)
        return ToolOutcome(
            name=req.name, status="failed", reason=reason, remediation=req.docs_url,
        ), None

    shell = command.which("bash") or "/bin/bash"
    ran = command.run_command([shell, "-c", fetched.stdout], capture=False)
    run_receipt = (
        StepReceipt.success(step="bootstrap", subject=target, duration_ms=ran.elapsed_ms)
        if ran.ok
        else StepReceipt.failure(
            step="bootstrap", subject=target,
            error=f"installer exited with code {ran.returncode}",
            duration_ms=ran.elapsed_ms,
        )
    )

    manager = registry.get(target)
    if manager is not None and manager.is_available():
        outcome = _present(req, manager.probe() or target, manager, status="installed")
        outcome.receipts.append(run_receipt)
        return outcome, manager

    reason = run_receipt.error or f"{target} still not found after running its installer"
    logger.error("Installing %s failed: %s. See %s", target, reason, req.docs_url)
    return ToolOutcome(
        name=req.name, status="failed", reason=reason,
        remediation=req.docs_url, receipts=[run_receipt],
    ), None


def ensure_tools(
    settings: Settings,
    registry: PackageManagerRegistry,
    confirm: Confirm,
) -> InstallReport:
    """Ensure every configured tool is present.

    Raises:
        InstallationError: An install ran but a tool is still missing.
        MissingDependencyError: Tools are missing because installation
            was declined or impossible.
    """
    manager = detect_package_manager(registry, settings.package_managers)
    report = InstallReport(manager=manager.name if manager else None)

    for req in settings.tools:
        if req.kind == "package-manager":
            if manager is not None:
                outcome = _present(req, manager.probe() or manager.name, manager)
            else:
                outcome, manager = bootstrap_package_manager(req, registry, confirm)
                if manager is not None:
                    report.manager = manager.name
        else:
            outcome = install_tool(req, manager, confirm)
        report.outcomes.append(outcome)

    missing = report.missing
    if not missing:
        return report

    failed = [o for o in report.outcomes if o.status == "failed"]
    if failed:
        names = ", ".join(o.name for o in failed)
        error = InstallationError(
            f"Installation failed for {names}; still missing: "
            + "; ".join(f"{tool}: {reason}" for tool, reason in missing.items()),
            remediation=failed[0].remediation or None,
            receipts=report.receipts,
        )
    else:
        error = MissingDependencyError(missing, receipts=report.receipts)
    raise error
