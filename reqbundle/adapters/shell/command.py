"""
Subprocess executor — run prepared commands and classify the result.

This is the only place reqbundle starts processes. Everything runs
synchronously: no timeout, no retry, no cancellation.
"""

from __future__ import annotations

import logging
import subprocess
import time
from pathlib import Path

from reqbundle.adapters.base import Executor
from reqbundle.core.models.command import CommandSpec, ExecutionOutcome

logger = logging.getLogger(__name__)


class CommandExecutor(Executor):
    """Execute a CommandSpec with ``subprocess.run`` and capture output.

    Classification, in order:
        - spawn fails with "not found"   → tool_missing
        - spawn fails otherwise          → spawn_error
        - nonzero exit status            → non_zero_exit (stderr verbatim)
        - otherwise                      → ok
    """

    def __init__(self, verbose: bool = False, python_bin: str = "python3"):
        self.verbose = verbose
        self.python_bin = python_bin

    @property
    def name(self) -> str:
        return "subprocess"

    def execute(self, spec: CommandSpec, working_dir: str | None = None) -> ExecutionOutcome:
        cwd = working_dir or spec.cwd
        command = spec.display

        if cwd and not Path(cwd).is_dir():
            # subprocess would report this as FileNotFoundError too
            return ExecutionOutcome.failure(
                "spawn_error",
                command=command,
                error=f"Working directory does not exist: {cwd}",
            )

        logger.info("running %s", command)
        start = time.monotonic()

        try:
            result = subprocess.run(
                spec.argv,
                cwd=cwd,
                capture_output=True,
                encoding="utf-8",
                errors="replace",
            )
        except FileNotFoundError:
            return ExecutionOutcome.failure(
                "tool_missing",
                command=command,
                error=self._missing_message(spec),
            )
        except OSError as e:
            return ExecutionOutcome.failure(
                "spawn_error",
                command=command,
                error=f"{type(e).__name__}: {e}",
            )

        elapsed_ms = int((time.monotonic() - start) * 1000)

        if result.returncode != 0:
            return ExecutionOutcome.failure(
                "non_zero_exit",
                command=command,
                error=result.stderr,
                exit_code=result.returncode,
                stdout=result.stdout,
                stderr=result.stderr,
                duration_ms=elapsed_ms,
            )

        if self.verbose and result.stdout:
            logger.info(result.stdout)

        return ExecutionOutcome.success(
            command=command,
            stdout=result.stdout,
            stderr=result.stderr,
            duration_ms=elapsed_ms,
        )

    def _missing_message(self, spec: CommandSpec) -> str:
        """Name the missing tool and the option that fixes it."""
        if spec.containerized:
            return f"{spec.executable} not found! Please install it."
        if spec.executable == self.python_bin:
            return f"{spec.executable} not found! Try the python_bin option."
        return f"{spec.executable} not found! Check the post_install_command option."
