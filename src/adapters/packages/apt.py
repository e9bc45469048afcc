"""APT adapter: Debian and Ubuntu."""

from __future__ import annotations

from src.adapters.base import PackageManager


class AptPackageManager(PackageManager):
    """Refresh the index, then ``apt install -y PKG``."""

    probe_command = "apt"
    version_pattern = r"apt\s+(\d+\.\d+(?:\.\d+)?)"

    @property
    def name(self) -> str:
        return "apt"

    def install_commands(self, package: str) -> list[list[str]]:
        return [
            ["apt", "update"],
            ["apt", "install", "-y", package],
        ]
