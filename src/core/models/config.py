"""
BootstrapConfig: the optional ``dotstrap.yml`` at the checkout root.

Every field has a default, so a checkout without the file bootstraps the
standard zsh layout.  Relative paths are relative to the checkout (for
sources and directories) or to HOME (for link targets).
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_PACKAGE_MANAGERS = ["brew", "apt", "dnf", "pacman"]
DEFAULT_TOOLS = ["curl", "package-manager", "git", "zsh"]


class LinkEntry(BaseModel):
    """A symlink declared in dotstrap.yml."""

    source: str
    target: str


def _default_links() -> list[LinkEntry]:
    return [LinkEntry(source="zsh/.zshenv", target=".zshenv")]


class BootstrapConfig(BaseModel):
    """Declared bootstrap behaviour for one dotfiles checkout."""

    model_config = ConfigDict(extra="forbid")

    version: int = 1

    shell: str = "zsh"
    zdotdir: str = "zsh"
    fragments_dir: str = "rc.d"
    plugins_dir: str = "plugins"
    compile: bool = True

    # Preference ranking: first available wins
    package_managers: list[str] = Field(
        default_factory=lambda: list(DEFAULT_PACKAGE_MANAGERS),
    )
    tools: list[str] = Field(default_factory=lambda: list(DEFAULT_TOOLS))
    links: list[LinkEntry] = Field(default_factory=_default_links)
    directories: list[str] = Field(default_factory=list)

    @field_validator("package_managers", "tools")
    @classmethod
    def _no_duplicates(cls, value: list[str]) -> list[str]:
        dupes = sorted({v for v in value if value.count(v) > 1})
        if dupes:
            raise ValueError(f"duplicate entries: {', '.join(dupes)}")
        return value
