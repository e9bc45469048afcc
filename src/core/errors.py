"""
Error taxonomy for every fatal condition of a bootstrap run.

Adapters never raise; they return receipts.  Services raise one of these
when a step cannot continue, and the bootstrap use case turns the
exception into a failed result.  The ``kind`` attribute is what ends up
in ``BootstrapResult.error_kind`` and in ``--json`` output.
"""

from __future__ import annotations


class BootstrapError(Exception):
    """Base class for all fatal bootstrap failures."""

    kind = "bootstrap"

    def __init__(
        self,
        message: str,
        *,
        remediation: str | None = None,
        receipts: list | None = None,
    ):
        super().__init__(message)
        self.remediation = remediation
        # Receipts of the work done before the failure
        self.receipts = list(receipts or [])

    def __str__(self) -> str:
        message = super().__str__()
        if self.remediation:
            return f"{message} (see {self.remediation})"
        return message


class MissingDependencyError(BootstrapError):
    """A required tool is absent and was declined or cannot be installed.

    ``missing`` maps each tool name to the reason it is still missing.
    """

    kind = "missing-dependency"

    def __init__(self, missing: dict[str, str], *, receipts: list | None = None):
        self.missing = dict(missing)
        details = "; ".join(f"{tool}: {reason}" for tool, reason in self.missing.items())
        super().__init__(f"Missing required tools: {details}", receipts=receipts)


class InstallationError(BootstrapError):
    """An install command ran but the tool is still not detected."""

    kind = "installation-failure"


class FilesystemError(BootstrapError):
    """Directory creation, backup or symlink creation failed."""

    kind = "filesystem"


class VersionControlError(BootstrapError):
    """Submodule sync or update failed."""

    kind = "version-control"


class HandoffError(BootstrapError):
    """The target shell is unavailable at the final step."""

    kind = "handoff"
