"""
Static catalogs: the tools dotstrap knows how to check and install.

Usage::

    from src.core.data import TOOL_REQUIREMENTS

    git = TOOL_REQUIREMENTS["git"]
"""

from src.core.data.tools import HOMEBREW_INSTALL_URL, TOOL_REQUIREMENTS

__all__ = ["HOMEBREW_INSTALL_URL", "TOOL_REQUIREMENTS"]
