"""
Deployment unit model — one function or service to package.

Units are declared in the project file. Units that point at the same
module share one dependency installation.
"""

from __future__ import annotations

import shlex
from typing import Annotated

from pydantic import AfterValidator, BaseModel, ConfigDict

# Module identifier of units that don't declare one: the project root.
ROOT_MODULE = "."


def check_hook_command(value: str | None) -> str | None:
    """Reject a post-install command that can't be split into words."""
    if value is not None:
        try:
            shlex.split(value)
        except ValueError as e:
            raise ValueError(f"post_install_command {value!r}: {e}") from e
    return value


HookCommand = Annotated[str | None, AfterValidator(check_hook_command)]


class DeploymentUnit(BaseModel):
    """A packageable unit whose dependencies are installed together."""

    model_config = ConfigDict(frozen=True)

    name: str
    module: str | None = None            # directory holding the manifest
    vendor: str | None = None            # pre-built libraries to copy in
    post_install_command: HookCommand = None
    post_install_args: tuple[str, ...] = ()

    @property
    def module_id(self) -> str:
        """The normalized module identifier used for deduplication."""
        return self.module or ROOT_MODULE

    def install_settings(self) -> tuple[str | None, str | None, tuple[str, ...]]:
        """The per-module settings that only the first unit gets to apply."""
        return (self.vendor, self.post_install_command, self.post_install_args)
