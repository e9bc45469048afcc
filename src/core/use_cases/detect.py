"""
Detect use case: report the package manager and tool presence.

Read-only: nothing is installed, linked or changed.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from src.adapters.registry import PackageManagerRegistry, default_registry
from src.core.models.settings import Settings
from src.core.services.detection import DetectionReport, detect_environment
from src.core.services.linker import is_linked

logger = logging.getLogger(__name__)


@dataclass
class DetectResult:
    """Result of the detect use case."""

    detection: DetectionReport
    checkout: Path
    links: dict[str, bool] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "checkout": str(self.checkout),
            "links": self.links,
            "detection": self.detection.to_dict(),
        }


def run_detect(
    settings: Settings,
    registry: PackageManagerRegistry | None = None,
) -> DetectResult:
    """Probe the package manager, every configured tool and each link."""
    registry = registry or default_registry()
    detection = detect_environment(settings, registry)
    links = {str(spec.target): is_linked(spec) for spec in settings.links}
    return DetectResult(detection=detection, checkout=settings.checkout, links=links)
