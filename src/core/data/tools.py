"""
Tool registry: every prerequisite the bootstrapper knows how to install.

Pure data, no logic.  Keys are the names used in ``dotstrap.yml``'s
``tools`` list.
"""

from __future__ import annotations

from src.core.models.tool import ToolRequirement

HOMEBREW_INSTALL_URL = "https://raw.githubusercontent.com/Homebrew/install/HEAD/install.sh"


TOOL_REQUIREMENTS: dict[str, ToolRequirement] = {
    "curl": ToolRequirement(
        name="curl",
        label="curl",
        executable="curl",
        packages={"_default": "curl"},
        version_command=["curl", "--version"],
        version_pattern=r"curl\s+(\d+\.\d+\.\d+)",
        docs_url="https://curl.se/download.html",
    ),
    "package-manager": ToolRequirement(
        name="package-manager",
        label="Package manager",
        kind="package-manager",
        docs_url="https://docs.brew.sh/Installation",
        bootstrap_url=HOMEBREW_INSTALL_URL,
        bootstrap_manager="brew",
    ),
    "git": ToolRequirement(
        name="git",
        label="Git",
        executable="git",
        packages={"_default": "git"},
        version_command=["git", "--version"],
        version_pattern=r"git version\s+(\d+\.\d+\.\d+)",
        docs_url="https://git-scm.com/downloads",
    ),
    "zsh": ToolRequirement(
        name="zsh",
        label="Zsh",
        executable="zsh",
        packages={"_default": "zsh"},
        version_command=["zsh", "--version"],
        version_pattern=r"zsh\s+(\d+\.\d+(?:\.\d+)?)",
        docs_url="https://github.com/ohmyzsh/ohmyzsh/wiki/Installing-ZSH",
    ),
}
