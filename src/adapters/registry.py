"""
Package manager registry: ordered lookup and detection.

The registry holds every supported package manager adapter.  Detection
walks a preference list and returns the first manager whose probe
command is on PATH.  The order of that list is the only tie-break: it is
never sorted or otherwise reordered.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from src.adapters.base import PackageManager
from src.adapters.packages import (
    AptPackageManager,
    BrewPackageManager,
    DnfPackageManager,
    PacmanPackageManager,
)

logger = logging.getLogger(__name__)


class PackageManagerRegistry:
    """Central registry of package manager adapters.

    Features:
        - Register/unregister adapters by name
        - Ordered detection against a preference list
        - Query availability of every registered manager
    """

    def __init__(self) -> None:
        self._managers: dict[str, PackageManager] = {}

    def register(self, manager: PackageManager) -> None:
        name = manager.name
        if name in self._managers:
            logger.warning("Overwriting existing package manager: %s", name)
        self._managers[name] = manager
        logger.debug("Registered package manager: %s", name)

    def unregister(self, name: str) -> None:
        """Remove a package manager from the registry."""
        self._managers.pop(name, None)

    def get(self, name: str) -> PackageManager | None:
        """Look up a package manager by name."""
        return self._managers.get(name)

    def list_managers(self) -> list[str]:
        """Registered names, in registration order."""
        return list(self._managers.keys())

    def detect(self, order: Sequence[str] | None = None) -> PackageManager | None:
        """Return the first available manager in ``order``, or None.

        Args:
            order: Preference list of manager names.  Defaults to
                registration order.  Unknown names are skipped with a
                warning.
        """
        names = list(order) if order is not None else self.list_managers()
        for name in names:
            manager = self._managers.get(name)
            if manager is None:
                logger.warning("Unknown package manager in preference list: %s", name)
                continue
            try:
                available = manager.is_available()
            except Exception as e:
                logger.debug("Probe for %s raised: %s", name, e)
                available = False
            if available:
                logger.debug("Detected package manager: %s", name)
                return manager
        logger.debug("No package manager found among: %s", ", ".join(names))
        return None

    def manager_status(self, order: Sequence[str] | None = None) -> dict[str, dict[str, Any]]:
        """Availability of each manager, in preference order."""
        names = list(order) if order is not None else self.list_managers()
        status: dict[str, dict[str, Any]] = {}
        for name in names:
            manager = self._managers.get(name)
            if manager is None:
                status[name] = {"name": name, "registered": False, "available": False}
                continue
            try:
                path = manager.probe()
            except Exception:
                path = None
            status[name] = {
                "name": name,
                "registered": True,
                "available": path is not None,
                "path": path,
                "type": manager.__class__.__name__,
            }
        return status


def default_registry() -> PackageManagerRegistry:
    """A registry with every supported package manager."""
    registry = PackageManagerRegistry()
    registry.register(BrewPackageManager())
    registry.register(AptPackageManager())
    registry.register(DnfPackageManager())
    registry.register(PacmanPackageManager())
    return registry
