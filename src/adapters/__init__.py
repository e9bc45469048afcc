"""Adapters: bindings for package managers and git.

Public re-exports for convenient access.
"""

from src.adapters.base import Adapter, PackageManager
from src.adapters.mock import MockPackageManager
from src.adapters.registry import PackageManagerRegistry, default_registry

__all__ = [
    "Adapter",
    "MockPackageManager",
    "PackageManager",
    "PackageManagerRegistry",
    "default_registry",
]
