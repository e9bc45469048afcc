"""
Mock package manager: test double for install flows.

Simulates a package manager without touching the system.  ``on_install``
lets a test make the "installed" tool appear on its fake PATH.
"""

from __future__ import annotations

from collections.abc import Callable

from src.adapters.base import PackageManager
from src.core.models.receipt import StepReceipt


class MockPackageManager(PackageManager):
    """Universal mock package manager for testing.

    By default every install succeeds.  Specific packages can be made to
    fail with ``set_failure``.
    """

    def __init__(
        self,
        manager_name: str = "mock",
        available: bool = True,
        on_install: Callable[[str], None] | None = None,
    ):
        self._name = manager_name
        self._available = available
        self._on_install = on_install
        self._failures: dict[str, str] = {}
        self._installed: list[str] = []

    @property
    def name(self) -> str:
        return self._name

    @property
    def installed(self) -> list[str]:
        """Packages passed to ``install``, in call order."""
        return self._installed

    @property
    def call_count(self) -> int:
        return len(self._installed)

    def probe(self) -> str | None:
        return f"/mock/bin/{self._name}" if self._available else None

    def version(self) -> str | None:
        return "0.0.0-mock" if self._available else None

    def set_failure(self, package: str, error: str = "Mock failure") -> None:
        """Configure installing ``package`` to fail."""
        self._failures[package] = error

    def install_commands(self, package: str) -> list[list[str]]:
        return [[self._name, "install", package]]

    def install(self, package: str) -> StepReceipt:
        self._installed.append(package)
        if package in self._failures:
            return StepReceipt.failure(
                step="install", subject=package, error=self._failures[package],
            )
        if self._on_install:
            self._on_install(package)
        return StepReceipt.success(
            step="install",
            subject=package,
            output=f"[mock] installed {package}",
            metadata={"manager": self._name, "mock": True},
        )

    def reset(self) -> None:
        self._installed.clear()
        self._failures.clear()
