"""
Tests for domain models — options, units, projects, outcomes.
"""

import pytest
from pydantic import ValidationError

from reqbundle.core.errors import NonZeroExitError, SpawnError, ToolMissingError
from reqbundle.core.models import (
    CommandSpec,
    DeploymentUnit,
    ExecutionOutcome,
    InstallationOptions,
    Project,
)


class TestInstallationOptions:
    def test_defaults(self):
        opts = InstallationOptions()
        assert opts.runtime == "python3.12"
        assert "boto3" in opts.no_deploy
        assert opts.pip_cmd_extra_args == ()
        assert not opts.builds_image

    def test_frozen(self):
        opts = InstallationOptions()
        with pytest.raises(ValidationError):
            opts.output_dir = "elsewhere"

    def test_default_image_only_in_container_mode(self):
        assert InstallationOptions().docker_image is None
        assert InstallationOptions(dockerize_pip=True).docker_image == "public.ecr.aws/sam/build-python3.12"

    def test_image_and_file_exclusive(self):
        with pytest.raises(ValidationError, match="mutually exclusive"):
            InstallationOptions(docker_image="a", docker_file="b")

    def test_unsplittable_hook_rejected(self):
        with pytest.raises(ValidationError, match="No closing quotation"):
            InstallationOptions(post_install_command="echo 'oops")


class TestDeploymentUnit:
    def test_module_id_defaults_to_root(self):
        assert DeploymentUnit(name="api").module_id == "."
        assert DeploymentUnit(name="api", module="").module_id == "."
        assert DeploymentUnit(name="api", module="svc").module_id == "svc"

    def test_install_settings(self):
        unit = DeploymentUnit(name="api", vendor="v", post_install_command="x", post_install_args=("a",))
        assert unit.install_settings() == ("v", "x", ("a",))

    def test_unsplittable_hook_rejected(self):
        with pytest.raises(ValidationError, match="No closing quotation"):
            DeploymentUnit(name="api", post_install_command="echo 'oops")


class TestProject:
    def test_modules_in_declared_order(self):
        project = Project(units=[
            DeploymentUnit(name="b", module="svc"),
            DeploymentUnit(name="a"),
            DeploymentUnit(name="c", module="svc"),
        ])
        assert project.modules == ["svc", "."]


class TestCommandSpec:
    def test_display_quotes(self):
        spec = CommandSpec(executable="bash", args=("-c", "echo hi"))
        assert spec.argv == ["bash", "-c", "echo hi"]
        assert spec.display == "bash -c 'echo hi'"


class TestExecutionOutcome:
    def test_ok(self):
        ExecutionOutcome.success(command="x").raise_for_status()

    def test_tool_missing(self):
        outcome = ExecutionOutcome.failure("tool_missing", "docker", error="docker not found! Please install it.")
        with pytest.raises(ToolMissingError, match="Please install it"):
            outcome.raise_for_status()

    def test_non_zero_exit_carries_stderr(self):
        outcome = ExecutionOutcome.failure(
            "non_zero_exit", "pip", error="boom", stderr="boom", exit_code=2,
        )
        with pytest.raises(NonZeroExitError) as exc_info:
            outcome.raise_for_status()
        assert str(exc_info.value) == "boom"
        assert exc_info.value.command == "pip"

    def test_spawn_error(self):
        outcome = ExecutionOutcome.failure("spawn_error", "x", error="PermissionError: denied")
        with pytest.raises(SpawnError, match="denied"):
            outcome.raise_for_status()
