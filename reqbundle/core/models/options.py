"""
Installation options — the resolved configuration for one run.

Every optional field has its default resolved here, once, so the
engine components never have to guess.
"""

from __future__ import annotations

import sys

from pydantic import BaseModel, ConfigDict, Field, model_validator

from reqbundle.core.models.unit import HookCommand

# Packages already present in the Lambda runtime, or only needed to install.
DEFAULT_NO_DEPLOY: tuple[str, ...] = (
    "boto3",
    "botocore",
    "docutils",
    "jmespath",
    "python-dateutil",
    "s3transfer",
    "six",
    "pip",
    "setuptools",
)

DEFAULT_RUNTIME = "python3.12"
DEFAULT_OUTPUT_DIR = ".reqbundle"


def default_python_bin() -> str:
    """The interpreter used to run pip natively."""
    return "python.exe" if sys.platform == "win32" else "python3"


def default_docker_image(runtime: str) -> str:
    """Public build image matching the target runtime."""
    return f"public.ecr.aws/sam/build-{runtime}"


class InstallationOptions(BaseModel):
    """Immutable installer configuration.

    When ``dockerize_pip`` is on, exactly one of ``docker_image`` and
    ``docker_file`` is active. Giving neither selects the default build
    image for ``runtime``.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    python_bin: str = Field(default_factory=default_python_bin)
    runtime: str = DEFAULT_RUNTIME

    # ── Container mode ───────────────────────────────────────────
    dockerize_pip: bool = False
    docker_image: str | None = None
    docker_file: str | None = None
    docker_ssh: bool = False

    # ── Installer ────────────────────────────────────────────────
    pip_cmd_extra_args: tuple[str, ...] = ()
    no_deploy: frozenset[str] = frozenset(DEFAULT_NO_DEPLOY)
    file_name: str = "requirements.txt"
    use_pipenv: bool = False

    # ── Layout and behavior ──────────────────────────────────────
    individually: bool = False
    output_dir: str = DEFAULT_OUTPUT_DIR
    verbose: bool = False
    strict_modules: bool = False

    # ── Single-pass extras ───────────────────────────────────────
    vendor: str | None = None
    post_install_command: HookCommand = None
    post_install_args: tuple[str, ...] = ()

    @model_validator(mode="after")
    def _resolve_image(self) -> InstallationOptions:
        if self.docker_image and self.docker_file:
            raise ValueError("docker_image and docker_file are mutually exclusive")
        if self.dockerize_pip and not self.docker_image and not self.docker_file:
            # frozen model: bypass __setattr__ for the one-time default
            object.__setattr__(self, "docker_image", default_docker_image(self.runtime))
        return self

    @property
    def builds_image(self) -> bool:
        """Whether the container image must be built from a Dockerfile."""
        return self.dockerize_pip and self.docker_file is not None
