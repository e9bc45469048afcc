"""
StepReceipt: the outcome of one bootstrap step or sub-action.

Adapters and services report what they did through receipts instead of
return codes.  A receipt is ``ok`` (something happened and succeeded),
``skipped`` (nothing to do) or ``failed``.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any, Literal

from pydantic import BaseModel, Field


def _now_iso() -> str:
    """Current UTC time as ISO string."""
    return datetime.now(UTC).isoformat()


class StepReceipt(BaseModel):
    """Result of a single step.

    ``step`` names the component (``tools``, ``link``, ``submodules``...),
    ``subject`` names what it acted on (a tool, a path, a command).
    """

    step: str
    subject: str = ""
    status: Literal["ok", "skipped", "failed"] = "ok"

    started_at: str = Field(default_factory=_now_iso)
    duration_ms: int = 0

    output: str = ""
    error: str | None = None

    metadata: dict[str, Any] = Field(default_factory=dict)

    @property
    def ok(self) -> bool:
        """Whether the step succeeded."""
        return self.status == "ok"

    @property
    def failed(self) -> bool:
        """Whether the step failed."""
        return self.status == "failed"

    @property
    def skipped(self) -> bool:
        return self.status == "skipped"

    @classmethod
    def success(
        cls,
        step: str,
        subject: str = "",
        output: str = "",
        **kwargs: Any,
    ) -> StepReceipt:
        """Create a success receipt."""
        return cls(step=step, subject=subject, status="ok", output=output, **kwargs)

    @classmethod
    def failure(
        cls,
        step: str,
        subject: str = "",
        error: str = "",
        **kwargs: Any,
    ) -> StepReceipt:
        """Create a failure receipt."""
        return cls(step=step, subject=subject, status="failed", error=error, **kwargs)

    @classmethod
    def skip(
        cls,
        step: str,
        subject: str = "",
        reason: str = "",
        **kwargs: Any,
    ) -> StepReceipt:
        """Create a skip receipt."""
        return cls(step=step, subject=subject, status="skipped", output=reason, **kwargs)
