"""
Domain models: Pydantic types for the bootstrapper.

All models are re-exported here for convenient access:

    from src.core.models import Settings, StepReceipt, ToolRequirement
"""

from src.core.models.config import BootstrapConfig, LinkEntry
from src.core.models.handoff import ShellHandoff
from src.core.models.receipt import StepReceipt
from src.core.models.settings import Settings, XdgPaths
from src.core.models.tool import LinkSpec, ToolRequirement

__all__ = [
    # config.py
    "BootstrapConfig",
    "LinkEntry",
    # handoff.py
    "ShellHandoff",
    # receipt.py
    "StepReceipt",
    # settings.py
    "Settings",
    "XdgPaths",
    # tool.py
    "LinkSpec",
    "ToolRequirement",
]
