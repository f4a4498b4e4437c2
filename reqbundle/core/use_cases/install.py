"""
Install use case — package a project's requirements.

This is the vertical slice the CLI calls: load config, build the
install context, run (or plan) the orchestration, and report.
Errors come back in the result rather than as exceptions.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from reqbundle.adapters.base import Executor
from reqbundle.adapters.containers.docker import DryRunDockerEngine
from reqbundle.adapters.mock import MockExecutor
from reqbundle.core.config.loader import ConfigError, find_project_file, load_project, service_path
from reqbundle.core.context import InstallContext
from reqbundle.core.engine.orchestrator import install_all, plan_commands
from reqbundle.core.errors import InstallError
from reqbundle.core.models.command import PlannedCommand
from reqbundle.core.models.project import Project

logger = logging.getLogger(__name__)


@dataclass
class InstallResult:
    """Result of installing (or planning) a project's requirements."""

    project: Project | None = None
    service_path: Path | None = None
    modules: list[str] = field(default_factory=list)
    planned: list[PlannedCommand] = field(default_factory=list)
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_dict(self) -> dict:
        result: dict = {}
        if self.error:
            result["error"] = self.error
            return result

        result["project_name"] = self.project.name if self.project else ""
        result["service_path"] = str(self.service_path)
        result["output_dir"] = self.project.options.output_dir if self.project else ""
        result["modules"] = self.modules
        if self.planned:
            result["commands"] = [
                {"module": p.module, "kind": p.kind, "argv": p.spec.argv}
                for p in self.planned
            ]
        return result


def _load(config_path: Path | None, result: InstallResult) -> bool:
    """Load the project into ``result``; False (with error set) on failure."""
    try:
        if config_path is None:
            config_path = find_project_file()
        if config_path is None:
            result.error = "No reqbundle.yml found."
            return False
        result.project = load_project(config_path)
        result.service_path = service_path(config_path)
    except ConfigError as e:
        result.error = str(e)
        return False
    return True


def run_install(
    config_path: Path | None = None,
    mock_mode: bool = False,
    executor: Executor | None = None,
) -> InstallResult:
    """Install every unit's requirements into the output directory.

    Args:
        config_path: Optional explicit path to reqbundle.yml.
        mock_mode: If True, record commands instead of running them.
        executor: Optional pre-configured executor (overrides mock_mode).

    Returns:
        InstallResult with the installed module identifiers.
    """
    result = InstallResult()
    if not _load(config_path, result):
        return result

    project = result.project
    assert project is not None and result.service_path is not None

    if executor is None and mock_mode:
        executor = MockExecutor(default_stdout="[mock] executed")

    context = InstallContext(
        service_path=result.service_path,
        options=project.options,
        executor=executor,
    )

    try:
        installed = install_all(project.units, context)
    except (InstallError, OSError) as e:
        logger.debug("Install failed", exc_info=True)
        result.error = str(e) or f"{type(e).__name__} (no output)"
        return result

    if project.options.individually:
        result.modules = [m for m in project.modules if m in installed]
    else:
        result.modules = sorted(installed)
    return result


def run_plan(config_path: Path | None = None) -> InstallResult:
    """Build the install commands without running anything.

    Container helpers go to a dry-run engine over a mock executor, so
    the plan shows the image tag a Dockerfile build would produce and a
    placeholder where a Windows host would look up the container uid.
    """
    result = InstallResult()
    if not _load(config_path, result):
        return result

    project = result.project
    assert project is not None and result.service_path is not None

    executor = MockExecutor()
    context = InstallContext(
        service_path=result.service_path,
        options=project.options,
        executor=executor,
        engine=DryRunDockerEngine(executor, project.options.output_dir),
    )
    try:
        result.planned = plan_commands(project.units, context)
    except InstallError as e:
        result.error = str(e)
        return result

    result.modules = list(dict.fromkeys(p.module for p in result.planned))
    return result
