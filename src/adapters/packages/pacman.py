"""pacman adapter: Arch Linux and derivatives."""

from __future__ import annotations

from src.adapters.base import PackageManager


class PacmanPackageManager(PackageManager):
    """Sync the database and install in one ``pacman -Sy`` call."""

    probe_command = "pacman"
    version_pattern = r"Pacman\s+v(\d+\.\d+\.\d+)"

    @property
    def name(self) -> str:
        return "pacman"

    def install_commands(self, package: str) -> list[list[str]]:
        return [["pacman", "-Sy", "--noconfirm", package]]
