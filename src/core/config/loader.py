"""
Configuration loader: reads dotstrap.yml and resolves run settings.

``load_config`` reads the optional YAML file and validates it against
the Pydantic schema.  ``build_settings`` combines the config with the
process environment into the single ``Settings`` object every step
receives.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from pathlib import Path

import yaml

from src.core.data import TOOL_REQUIREMENTS
from src.core.models.config import BootstrapConfig
from src.core.models.settings import Settings, XdgPaths
from src.core.models.tool import LinkSpec

logger = logging.getLogger(__name__)

# Default config filename, looked up at the checkout root
CONFIG_FILE = "dotstrap.yml"


class ConfigError(Exception):
    """Raised when dotstrap.yml is invalid or unreadable."""


def _package_checkout() -> Path:
    """Checkout root when the package runs from ``<checkout>/src``."""
    return Path(__file__).resolve().parents[3]


def _is_checkout(path: Path) -> bool:
    return (path / CONFIG_FILE).is_file() or (path / "zsh" / ".zshenv").is_file()


def default_checkout() -> Path:
    """The dotfiles checkout this bootstrapper was started from.

    An editable install keeps the package at ``<checkout>/src``.  A regular
    install does not, so the current directory is used when it holds a
    checkout.  Use ``--checkout`` for any other layout.
    """
    package_root = _package_checkout()
    if _is_checkout(package_root):
        return package_root
    cwd = Path.cwd()
    if _is_checkout(cwd):
        return cwd.resolve()
    return package_root


def find_config_file(checkout: Path) -> Path | None:
    """Return ``<checkout>/dotstrap.yml`` if it exists."""
    candidate = checkout / CONFIG_FILE
    return candidate if candidate.is_file() else None


def load_config(path: Path | None = None) -> BootstrapConfig:
    """Load and validate bootstrap configuration.

    Args:
        path: Path to dotstrap.yml.  None means "no file": defaults.

    Returns:
        Validated BootstrapConfig.

    Raises:
        ConfigError: If the file is unreadable or invalid.
    """
    if path is None:
        logger.debug("No %s, using defaults", CONFIG_FILE)
        return BootstrapConfig()

    if not path.is_file():
        raise ConfigError(f"Config file not found: {path}")

    logger.debug("Loading bootstrap config from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    # An empty file is a valid "all defaults" config
    if data is None:
        data = {}

    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    try:
        config = BootstrapConfig.model_validate(data)
    except Exception as e:
        raise ConfigError(f"Invalid bootstrap configuration: {e}") from e

    unknown = [t for t in config.tools if t not in TOOL_REQUIREMENTS]
    if unknown:
        raise ConfigError(
            f"Unknown tools in {path}: {', '.join(unknown)}. "
            f"Known: {', '.join(TOOL_REQUIREMENTS)}"
        )

    return config


def _xdg_dir(environ: Mapping[str, str], var: str, default: Path) -> Path:
    value = environ.get(var, "")
    # Relative XDG values are ignored
    if value and os.path.isabs(value):
        return Path(value)
    return default


def resolve_xdg(home: Path, environ: Mapping[str, str]) -> XdgPaths:
    """Resolve the four XDG base directories, honouring overrides."""
    return XdgPaths(
        config_home=_xdg_dir(environ, "XDG_CONFIG_HOME", home / ".config"),
        cache_home=_xdg_dir(environ, "XDG_CACHE_HOME", home / ".cache"),
        data_home=_xdg_dir(environ, "XDG_DATA_HOME", home / ".local" / "share"),
        state_home=_xdg_dir(environ, "XDG_STATE_HOME", home / ".local" / "state"),
    )


def build_settings(
    config: BootstrapConfig,
    checkout: Path,
    environ: Mapping[str, str] | None = None,
) -> Settings:
    """Resolve every path and snapshot the environment, once.

    Args:
        config: Validated bootstrap configuration.
        checkout: The dotfiles checkout (made absolute here).
        environ: Process environment (default: ``os.environ``).

    Raises:
        ConfigError: If HOME cannot be determined.
    """
    env = dict(os.environ if environ is None else environ)

    home_value = env.get("HOME", "")
    if not home_value:
        raise ConfigError("HOME is not set; cannot resolve the home directory")
    home = Path(home_value)

    checkout = checkout.expanduser().resolve()
    zdotdir = checkout / config.zdotdir

    links = [
        LinkSpec(
            source=checkout / entry.source,
            target=home / Path(entry.target).expanduser(),
        )
        for entry in config.links
    ]

    settings = Settings(
        home=home,
        checkout=checkout,
        zdotdir=zdotdir,
        xdg=resolve_xdg(home, env),
        bin_dir=home / ".local" / "bin",
        shell=config.shell,
        package_managers=list(config.package_managers),
        tools=[TOOL_REQUIREMENTS[name] for name in config.tools],
        links=links,
        extra_directories=[home / Path(d).expanduser() for d in config.directories],
        fragments_dir=zdotdir / config.fragments_dir,
        plugins_dir=zdotdir / config.plugins_dir,
        compile_fragments=config.compile,
        current_zdotdir=env.get("ZDOTDIR") or None,
        login_shell=env.get("SHELL") or None,
        base_env=env,
    )
    logger.debug("Resolved settings for checkout %s", checkout)
    return settings


def load_settings(
    config_path: Path | None = None,
    checkout: Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> Settings:
    """Find, load and resolve configuration in one call.

    An explicit ``config_path`` also fixes the checkout to the config's
    directory unless ``checkout`` is given.
    """
    if checkout is None:
        checkout = config_path.parent if config_path else default_checkout()
    if config_path is None:
        config_path = find_config_file(checkout)
    return build_settings(load_config(config_path), checkout, environ)
