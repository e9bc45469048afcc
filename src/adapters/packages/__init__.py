"""Package manager adapters, one per supported manager."""

from src.adapters.packages.apt import AptPackageManager
from src.adapters.packages.brew import BrewPackageManager
from src.adapters.packages.dnf import DnfPackageManager
from src.adapters.packages.pacman import PacmanPackageManager

__all__ = [
    "AptPackageManager",
    "BrewPackageManager",
    "DnfPackageManager",
    "PacmanPackageManager",
]
