"""
CommandSpec and ExecutionOutcome models — the execution contract.

A CommandSpec describes one external invocation. An ExecutionOutcome
describes what happened when it ran. Executors take specs and return
outcomes, never exceptions; the orchestrator decides what is fatal.
"""

from __future__ import annotations

import shlex
from typing import Literal

from pydantic import BaseModel, ConfigDict

from reqbundle.core.errors import NonZeroExitError, SpawnError, ToolMissingError

OutcomeStatus = Literal["ok", "tool_missing", "non_zero_exit", "spawn_error"]


class CommandSpec(BaseModel):
    """A fully resolved, side-effect-free command description.

    Built by the CommandBuilder, consumed only by an executor.
    """

    model_config = ConfigDict(frozen=True)

    executable: str
    args: tuple[str, ...] = ()
    cwd: str = "."
    containerized: bool = False   # executable is the container engine

    @property
    def argv(self) -> list[str]:
        """Full argument vector, executable first."""
        return [self.executable, *self.args]

    @property
    def display(self) -> str:
        """Shell-quoted rendering for logs and plans."""
        return shlex.join(self.argv)


class ExecutionOutcome(BaseModel):
    """Result of running a CommandSpec.

    Transient: lives only as long as one invocation's handling.
    """

    status: OutcomeStatus = "ok"
    exit_code: int | None = None
    stdout: str = ""
    stderr: str = ""
    error: str | None = None
    command: str = ""
    duration_ms: int = 0

    @property
    def ok(self) -> bool:
        """Whether the command ran and exited with status 0."""
        return self.status == "ok"

    @classmethod
    def success(cls, command: str, stdout: str = "", stderr: str = "", **kwargs) -> ExecutionOutcome:
        """Create a success outcome."""
        return cls(
            status="ok",
            exit_code=0,
            command=command,
            stdout=stdout,
            stderr=stderr,
            **kwargs,
        )

    @classmethod
    def failure(
        cls,
        status: OutcomeStatus,
        command: str,
        error: str,
        **kwargs,
    ) -> ExecutionOutcome:
        """Create a failure outcome with the given classification."""
        return cls(status=status, command=command, error=error, **kwargs)

    def raise_for_status(self) -> None:
        """Raise the matching InstallError subclass unless the outcome is ok."""
        if self.status == "ok":
            return
        if self.status == "tool_missing":
            raise ToolMissingError(self.error or "executable not found")
        if self.status == "non_zero_exit":
            raise NonZeroExitError(
                self.stderr,
                exit_code=self.exit_code,
                command=self.command,
            )
        raise SpawnError(self.error or f"could not start {self.command}")


class PlannedCommand(BaseModel):
    """A command paired with the module it belongs to (for plans)."""

    module: str
    kind: Literal["install", "post_install"] = "install"
    spec: CommandSpec
