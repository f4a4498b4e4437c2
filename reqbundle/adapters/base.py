"""
Executor base — the protocol contract between the engine and processes.

The engine never spawns processes itself. It hands a CommandSpec to an
executor and gets an ExecutionOutcome back.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from reqbundle.core.models.command import CommandSpec, ExecutionOutcome


class Executor(ABC):
    """Abstract base class for command executors.

    Executors run external commands and return outcomes.
    They NEVER raise for process failures: a missing tool, a failed
    spawn and a nonzero exit are all captured in the ExecutionOutcome.

    To create a new executor:
        1. Subclass Executor
        2. Implement name and execute
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """The executor identifier (e.g., 'subprocess', 'mock')."""

    @abstractmethod
    def execute(self, spec: CommandSpec, working_dir: str | None = None) -> ExecutionOutcome:
        """Run ``spec`` to completion and classify the result.

        Blocks until the child exits. ``working_dir`` overrides
        ``spec.cwd`` when given.
        """

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r}>"
