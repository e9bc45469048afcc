"""
Detection service: package manager and tool presence.

Read-only probes.  Nothing in this module installs or changes anything;
it answers "which package manager wins" and "which tools are already on
PATH, at which version".
"""

from __future__ import annotations

import logging
import os
import re
from collections.abc import Sequence
from dataclasses import dataclass, field

from src.adapters.base import PackageManager
from src.adapters.registry import PackageManagerRegistry
from src.adapters.shell import command
from src.core.models.settings import Settings
from src.core.models.tool import ToolRequirement

logger = logging.getLogger(__name__)


@dataclass
class ToolStatus:
    """Presence of one required tool."""

    name: str
    label: str
    present: bool = False
    path: str | None = None
    version: str | None = None
    docs_url: str = ""

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "label": self.label,
            "present": self.present,
            "path": self.path,
            "version": self.version,
            "docs_url": self.docs_url,
        }


@dataclass
class DetectionReport:
    """Everything ``dotstrap detect`` reports."""

    package_manager: str | None = None
    managers: dict[str, dict] = field(default_factory=dict)
    tools: list[ToolStatus] = field(default_factory=list)

    @property
    def missing(self) -> list[str]:
        return [t.name for t in self.tools if not t.present]

    def to_dict(self) -> dict:
        return {
            "package_manager": self.package_manager,
            "managers": self.managers,
            "tools": [t.to_dict() for t in self.tools],
            "missing": self.missing,
        }


def detect_package_manager(
    registry: PackageManagerRegistry,
    order: Sequence[str],
) -> PackageManager | None:
    """First manager in ``order`` whose probe command is on PATH, else None."""
    manager = registry.detect(order)
    if manager is None:
        logger.warning(
            "No supported package manager found (looked for: %s)", ", ".join(order),
        )
    else:
        logger.info("Package manager: %s", manager.name)
    return manager


def manager_bin_dir(manager: PackageManager | None) -> str | None:
    """Directory holding the manager's executable.

    Tools installed by a user-level manager land next to it, which may
    not be on PATH yet.
    """
    if manager is None:
        return None
    path = manager.probe()
    return os.path.dirname(path) if path else None


def find_executable(name: str, manager: PackageManager | None = None) -> str | None:
    """Locate ``name`` on PATH, falling back to the manager's bin directory."""
    found = command.which(name)
    if found:
        return found
    bin_dir = manager_bin_dir(manager)
    if bin_dir:
        return command.which(name, path=bin_dir)
    return None


def find_tool(
    req: ToolRequirement,
    manager: PackageManager | None = None,
) -> str | None:
    """Path proving ``req`` is present, or None.

    For the package-manager requirement this is the detected manager's
    own executable.
    """
    if req.kind == "package-manager":
        return manager.probe() if manager else None
    return find_executable(req.executable or req.name, manager)


def get_tool_version(
    req: ToolRequirement,
    path: str | None = None,
    manager: PackageManager | None = None,
) -> str | None:
    """Installed version of a tool, or None if it can't be determined cheaply."""
    if req.kind == "package-manager":
        return manager.version() if manager else None

    if not req.version_command or not req.version_pattern:
        return None

    argv = list(req.version_command)
    if path:
        argv[0] = path
    r = command.run_command(argv, timeout=10)
    # Some tools print their version on stderr
    output = r.stdout + r.stderr
    match = re.search(req.version_pattern, output)
    return match.group(1) if match else None


def tool_status(req: ToolRequirement, manager: PackageManager | None = None) -> ToolStatus:
    path = find_tool(req, manager)
    return ToolStatus(
        name=req.name,
        label=req.display_name,
        present=path is not None,
        path=path,
        version=get_tool_version(req, path, manager) if path else None,
        docs_url=req.docs_url,
    )


def detect_environment(
    settings: Settings,
    registry: PackageManagerRegistry,
) -> DetectionReport:
    """Probe the package manager and every configured tool."""
    manager = registry.detect(settings.package_managers)
    report = DetectionReport(
        package_manager=manager.name if manager else None,
        managers=registry.manager_status(settings.package_managers),
    )
    for req in settings.tools:
        report.tools.append(tool_status(req, manager))
    return report
