"""
Mock executor — universal test double for command execution.

Used in mock mode (``reqbundle install --mock``, ``reqbundle plan``) and
in tests to record commands without touching pip or docker.
Configurable to return success, failure, or custom outcomes per
executable, and to run a side effect that simulates the command.
"""

from __future__ import annotations

from collections.abc import Callable

from reqbundle.adapters.base import Executor
from reqbundle.core.models.command import CommandSpec, ExecutionOutcome

SideEffect = Callable[[CommandSpec, str], None]


class MockExecutor(Executor):
    """Universal mock executor for testing.

    By default, returns success for everything. Outcomes can be
    scripted per executable, or per "executable first-arg" key
    (e.g. ``"docker build"``) which takes precedence.
    """

    def __init__(
        self,
        default_stdout: str = "",
        side_effect: SideEffect | None = None,
    ):
        self._default_stdout = default_stdout
        self._side_effect = side_effect
        self._responses: dict[str, ExecutionOutcome] = {}
        self._call_log: list[CommandSpec] = []

    @property
    def name(self) -> str:
        return "mock"

    @property
    def call_log(self) -> list[CommandSpec]:
        """All specs this mock has received, in order."""
        return self._call_log

    @property
    def call_count(self) -> int:
        """Number of times execute has been called."""
        return len(self._call_log)

    def set_response(self, key: str, outcome: ExecutionOutcome) -> None:
        """Set a custom outcome for an executable (or ``"exe subcommand"``)."""
        self._responses[key] = outcome

    def set_stdout(self, key: str, stdout: str) -> None:
        """Configure a successful outcome with the given stdout."""
        self._responses[key] = ExecutionOutcome.success(command=key, stdout=stdout)

    def set_failure(self, key: str, stderr: str = "Mock failure", exit_code: int = 1) -> None:
        """Configure an executable to exit with a failure status."""
        self._responses[key] = ExecutionOutcome.failure(
            "non_zero_exit",
            command=key,
            error=stderr,
            stderr=stderr,
            exit_code=exit_code,
        )

    def execute(self, spec: CommandSpec, working_dir: str | None = None) -> ExecutionOutcome:
        self._call_log.append(spec)

        key = f"{spec.executable} {spec.args[0]}" if spec.args else spec.executable
        if key in self._responses:
            return self._responses[key]
        if spec.executable in self._responses:
            return self._responses[spec.executable]

        if self._side_effect is not None:
            self._side_effect(spec, working_dir or spec.cwd)

        return ExecutionOutcome.success(command=spec.display, stdout=self._default_stdout)

    def reset(self) -> None:
        """Clear call log and custom responses."""
        self._call_log.clear()
        self._responses.clear()
