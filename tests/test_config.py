"""
Tests for config loading — reqbundle.yml → Project model.
"""

import textwrap
from pathlib import Path

import pytest

from reqbundle.core.config.loader import (
    ConfigError,
    find_project_file,
    load_project,
    parse_project,
    service_path,
)
from reqbundle.core.models.options import DEFAULT_NO_DEPLOY


def _write(tmp_path: Path, body: str) -> Path:
    config = tmp_path / "reqbundle.yml"
    config.write_text(textwrap.dedent(body))
    return config


class TestLoadProject:
    def test_minimal(self, tmp_path: Path):
        project = load_project(_write(tmp_path, "name: billing\n"))

        assert project.name == "billing"
        assert project.units == []
        opts = project.options
        assert opts.output_dir == ".reqbundle"
        assert opts.file_name == "requirements.txt"
        assert opts.no_deploy == frozenset(DEFAULT_NO_DEPLOY)
        assert not opts.dockerize_pip
        assert opts.docker_image is None

    def test_empty_file(self, tmp_path: Path):
        project = load_project(_write(tmp_path, ""))
        assert project.name == ""

    def test_full(self, tmp_path: Path):
        config = _write(tmp_path, """\
            name: billing
            requirements:
              dockerize_pip: true
              docker_ssh: true
              pip_cmd_extra_args: ["--no-cache-dir"]
              no_deploy: [boto3]
              individually: true
            functions:
              api: {}
              worker:
                module: workers
                vendor: ./vendor
                post_install_command: strip-tests
                post_install_args: ["--keep-licenses"]
        """)
        project = load_project(config)

        opts = project.options
        assert opts.dockerize_pip and opts.docker_ssh and opts.individually
        assert opts.docker_image == "public.ecr.aws/sam/build-python3.12"
        assert opts.pip_cmd_extra_args == ("--no-cache-dir",)
        assert opts.no_deploy == frozenset({"boto3"})

        assert [u.name for u in project.units] == ["api", "worker"]
        worker = project.units[1]
        assert worker.module_id == "workers"
        assert worker.post_install_args == ("--keep-licenses",)
        assert project.modules == [".", "workers"]

    def test_runtime_selects_default_image(self, tmp_path: Path):
        config = _write(tmp_path, """\
            requirements:
              dockerize_pip: true
              runtime: python3.11
        """)
        assert load_project(config).options.docker_image == "public.ecr.aws/sam/build-python3.11"

    def test_docker_file_leaves_image_unset(self, tmp_path: Path):
        config = _write(tmp_path, """\
            requirements:
              dockerize_pip: true
              docker_file: Dockerfile
        """)
        opts = load_project(config).options
        assert opts.docker_image is None
        assert opts.builds_image

    def test_image_and_file_conflict(self, tmp_path: Path):
        config = _write(tmp_path, """\
            requirements:
              dockerize_pip: true
              docker_image: my/img
              docker_file: Dockerfile
        """)
        with pytest.raises(ConfigError, match="mutually exclusive"):
            load_project(config)

    def test_unknown_option(self, tmp_path: Path):
        config = _write(tmp_path, """\
            requirements:
              dockerise_pip: true
        """)
        with pytest.raises(ConfigError, match="Invalid configuration"):
            load_project(config)

    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(ConfigError, match="not found"):
            load_project(tmp_path / "reqbundle.yml")

    def test_invalid_yaml(self, tmp_path: Path):
        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_project(_write(tmp_path, "name: [unclosed\n"))

    def test_not_a_mapping(self, tmp_path: Path):
        with pytest.raises(ConfigError, match="Expected a YAML mapping"):
            load_project(_write(tmp_path, "- a\n- b\n"))


class TestParseProject:
    def test_functions_must_be_mapping(self):
        with pytest.raises(ConfigError, match="'functions' must be a mapping"):
            parse_project({"functions": ["api"]})

    def test_requirements_must_be_mapping(self):
        with pytest.raises(ConfigError, match="'requirements' must be a mapping"):
            parse_project({"requirements": "yes"})

    def test_null_unit_settings(self):
        project = parse_project({"functions": {"api": None}})
        assert project.units[0].module_id == "."

    def test_non_mapping_unit_settings(self):
        with pytest.raises(ConfigError, match="Invalid unit settings"):
            parse_project({"functions": {"api": ["x"]}})


class TestFindProjectFile:
    def test_walks_up(self, tmp_path: Path):
        config = _write(tmp_path, "name: x\n")
        nested = tmp_path / "a" / "b"
        nested.mkdir(parents=True)
        assert find_project_file(nested) == config.resolve()

    def test_not_found(self, tmp_path: Path):
        assert find_project_file(tmp_path) is None

    def test_service_path(self, tmp_path: Path):
        config = _write(tmp_path, "")
        assert service_path(config) == tmp_path.resolve()
