"""
Tool and link models: what the bootstrapper must make true.

A ``ToolRequirement`` describes one prerequisite (curl, a package manager,
git, zsh) and how each supported package manager installs it.  A
``LinkSpec`` describes one symlink from the home directory into the
dotfiles checkout.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field

DEFAULT_PACKAGE_KEY = "_default"


class ToolRequirement(BaseModel):
    """A prerequisite tool.

    ``kind="binary"`` tools are present when ``executable`` is on PATH.
    The single ``kind="package-manager"`` requirement is present when any
    configured package manager is detected; it cannot be installed through
    a package manager, only through its ``bootstrap_url`` script.
    """

    name: str
    label: str = ""
    kind: Literal["binary", "package-manager"] = "binary"
    executable: str = ""

    # manager name → package name; "_default" applies to every manager
    packages: dict[str, str] = Field(default_factory=dict)

    version_command: list[str] = Field(default_factory=list)
    version_pattern: str = ""

    docs_url: str = ""

    # Official installer script for the package manager itself
    bootstrap_url: str | None = None
    bootstrap_manager: str | None = None

    @property
    def display_name(self) -> str:
        return self.label or self.name

    def package_for(self, manager: str) -> str | None:
        """Package name to install with ``manager``, or None if unsupported."""
        if manager in self.packages:
            return self.packages[manager]
        return self.packages.get(DEFAULT_PACKAGE_KEY)


class LinkSpec(BaseModel):
    """One symlink: ``target`` (under HOME) → ``source`` (inside the checkout)."""

    source: Path
    target: Path
