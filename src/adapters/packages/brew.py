"""
Homebrew adapter: user-level package manager for macOS and Linux.

Homebrew installs into a prefix that is often not on PATH until the
user's shell runs ``brew shellenv``, so the probe also looks in the
standard prefixes.  That matters right after a bootstrap install.
"""

from __future__ import annotations

import os

from src.adapters.base import PackageManager
from src.adapters.shell import command

# Standard Homebrew bin directories (Apple Silicon, Intel, Linux)
BREW_PREFIX_BINS = (
    "/opt/homebrew/bin",
    "/usr/local/bin",
    "/home/linuxbrew/.linuxbrew/bin",
)


class BrewPackageManager(PackageManager):
    """``brew install PKG``, never under sudo."""

    probe_command = "brew"
    needs_root = False
    version_pattern = r"Homebrew\s+(\d+\.\d+\.\d+)"

    @property
    def name(self) -> str:
        return "brew"

    def probe(self) -> str | None:
        found = command.which("brew")
        if found:
            return found
        return command.which("brew", path=os.pathsep.join(BREW_PREFIX_BINS))

    def install_commands(self, package: str) -> list[list[str]]:
        return [[self.executable(), "install", package]]
