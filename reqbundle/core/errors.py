"""
Install errors — everything that aborts an orchestration run.

Executors never raise these; they return outcomes. The orchestrator
turns failed outcomes into exceptions, and the first one ends the run.
"""

from __future__ import annotations


class InstallError(Exception):
    """Base class for fatal installation errors."""


class ManifestReadError(InstallError):
    """The source requirements manifest is missing or unreadable."""


class ToolMissingError(InstallError):
    """The installer interpreter or the container engine was not found."""


class NonZeroExitError(InstallError):
    """An installer or hook process exited with a failure status.

    ``str(error)`` is the captured standard error, verbatim, so the
    underlying tool's diagnostics reach the user unchanged.
    """

    def __init__(self, stderr: str, exit_code: int | None = None, command: str = ""):
        super().__init__(stderr)
        self.stderr = stderr
        self.exit_code = exit_code
        self.command = command


class SpawnError(InstallError):
    """A process could not be launched for an unclassified reason."""


class ModuleConflictError(InstallError):
    """Units sharing a module disagree on vendor or post-install settings."""
