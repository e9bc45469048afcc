"""DNF adapter: Fedora and RHEL family."""

from __future__ import annotations

from src.adapters.base import PackageManager


class DnfPackageManager(PackageManager):
    probe_command = "dnf"

    @property
    def name(self) -> str:
        return "dnf"

    def install_commands(self, package: str) -> list[list[str]]:
        return [["dnf", "install", "-y", package]]
