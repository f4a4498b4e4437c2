"""
Domain models — Pydantic types for reqbundle.

All models are re-exported here for convenient access:

    from reqbundle.core.models import DeploymentUnit, InstallationOptions, CommandSpec
"""

from reqbundle.core.models.command import (
    CommandSpec,
    ExecutionOutcome,
    OutcomeStatus,
    PlannedCommand,
)
from reqbundle.core.models.options import InstallationOptions
from reqbundle.core.models.project import Project
from reqbundle.core.models.unit import ROOT_MODULE, DeploymentUnit

__all__ = [
    # command.py
    "CommandSpec",
    "ExecutionOutcome",
    "OutcomeStatus",
    "PlannedCommand",
    # options.py
    "InstallationOptions",
    # project.py
    "Project",
    # unit.py
    "ROOT_MODULE",
    "DeploymentUnit",
]
