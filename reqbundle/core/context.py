"""
Install context — the single value every engine component works from.

Built once per run by whichever entry point launches the install:

    - CLI:    main.py → use_cases.install → InstallContext(...)
    - Tests:  InstallContext(service_path=tmp_path, executor=MockExecutor())

Design notes:
    - An explicit value passed by reference, not module-level state.
    - ``platform`` and ``environ`` are injectable so container argument
      building can be exercised for any host from any host.
    - The only environment variables read are HOME and SSH_AUTH_SOCK.
"""

from __future__ import annotations

import os
import sys
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from reqbundle.adapters.base import Executor
from reqbundle.adapters.containers.docker import DockerEngine
from reqbundle.adapters.shell.command import CommandExecutor
from reqbundle.adapters.shell.filesystem import LocalFilesystem
from reqbundle.core.models.options import InstallationOptions


@dataclass
class InstallContext:
    """Everything the engine needs for one orchestration run."""

    service_path: Path
    options: InstallationOptions = field(default_factory=InstallationOptions)
    executor: Executor | None = None
    filesystem: LocalFilesystem | None = None
    engine: DockerEngine | None = None
    platform: str = sys.platform
    environ: Mapping[str, str] = field(default_factory=lambda: dict(os.environ))

    def __post_init__(self) -> None:
        self.service_path = Path(self.service_path)
        if self.executor is None:
            self.executor = CommandExecutor(
                verbose=self.options.verbose,
                python_bin=self.options.python_bin,
            )
        if self.filesystem is None:
            self.filesystem = LocalFilesystem(self.service_path)
        if self.engine is None:
            self.engine = DockerEngine(self.executor, self.options.output_dir)

    @property
    def is_windows(self) -> bool:
        """Host uses a non-POSIX path separator."""
        return self.platform == "win32"

    @property
    def is_posix_host(self) -> bool:
        """Host can map its own numeric user id into containers."""
        return not self.is_windows
