"""
Project model — what reqbundle.yml declares.

A project has installer options and the deployment units whose
dependencies get packaged.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from reqbundle.core.models.options import InstallationOptions
from reqbundle.core.models.unit import DeploymentUnit


class Project(BaseModel):
    """Root project identity — loaded from reqbundle.yml."""

    name: str = ""
    options: InstallationOptions = Field(default_factory=InstallationOptions)
    units: list[DeploymentUnit] = Field(default_factory=list)

    @property
    def modules(self) -> list[str]:
        """Distinct module identifiers, in first-declared order."""
        seen: list[str] = []
        for unit in self.units:
            if unit.module_id not in seen:
                seen.append(unit.module_id)
        return seen
