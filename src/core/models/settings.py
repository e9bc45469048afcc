"""
Settings: the single resolved configuration of a bootstrap run.

Built once at startup from ``BootstrapConfig`` plus the process
environment (see ``src.core.config.loader.build_settings``) and passed
explicitly to every step.  No step reads ``os.environ`` on its own.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field

from src.core.models.tool import LinkSpec, ToolRequirement


class XdgPaths(BaseModel):
    """The four standard per-user base directories."""

    config_home: Path
    cache_home: Path
    data_home: Path
    state_home: Path

    def as_env(self) -> dict[str, str]:
        return {
            "XDG_CONFIG_HOME": str(self.config_home),
            "XDG_CACHE_HOME": str(self.cache_home),
            "XDG_DATA_HOME": str(self.data_home),
            "XDG_STATE_HOME": str(self.state_home),
        }

    def directories(self) -> list[Path]:
        return [self.config_home, self.cache_home, self.data_home, self.state_home]


class Settings(BaseModel):
    """Everything a bootstrap step needs to know."""

    home: Path
    checkout: Path
    zdotdir: Path
    xdg: XdgPaths
    bin_dir: Path

    shell: str = "zsh"
    package_managers: list[str] = Field(default_factory=list)
    tools: list[ToolRequirement] = Field(default_factory=list)
    links: list[LinkSpec] = Field(default_factory=list)
    extra_directories: list[Path] = Field(default_factory=list)

    fragments_dir: Path
    plugins_dir: Path
    compile_fragments: bool = True

    # Snapshot of the startup environment
    current_zdotdir: str | None = None
    login_shell: str | None = None
    base_env: dict[str, str] = Field(default_factory=dict)

    def directories(self) -> list[Path]:
        """Directories the linker creates, in creation order."""
        return [*self.xdg.directories(), self.bin_dir, *self.extra_directories]

    def shell_environment(self) -> dict[str, str]:
        """Environment for the handed-off shell."""
        env = dict(self.base_env)
        env.update(self.xdg.as_env())
        env["DOTFILES"] = str(self.checkout)
        env["ZDOTDIR"] = str(self.zdotdir)
        return env
