"""
Tests for the install use case — config → context → orchestration → result.
"""

from pathlib import Path

from reqbundle.adapters.mock import MockExecutor
from reqbundle.core.use_cases.install import run_install, run_plan


def _project(tmp_path: Path, body: str) -> Path:
    config = tmp_path / "reqbundle.yml"
    config.write_text(body)
    (tmp_path / "requirements.txt").write_text("attrs\nboto3")
    return config


class TestRunInstall:
    def test_single_pass(self, tmp_path: Path):
        config = _project(tmp_path, "name: billing\n")
        result = run_install(config, mock_mode=True)

        assert result.ok
        assert result.modules == ["."]
        assert result.to_dict()["project_name"] == "billing"
        assert (tmp_path / ".reqbundle" / "requirements.txt").read_text() == "attrs"

    def test_explicit_executor(self, tmp_path: Path):
        config = _project(tmp_path, "requirements:\n  pip_cmd_extra_args: [--no-cache-dir]\n")
        executor = MockExecutor()
        run_install(config, executor=executor)

        assert executor.call_log[0].argv[-1] == "--no-cache-dir"
        assert executor.call_log[0].cwd == str(tmp_path.resolve())

    def test_failure_becomes_error(self, tmp_path: Path):
        config = _project(tmp_path, "")
        executor = MockExecutor()
        executor.set_failure("python3", stderr="resolver conflict")
        result = run_install(config, executor=executor)

        assert not result.ok
        assert result.error == "resolver conflict"
        assert result.to_dict() == {"error": "resolver conflict"}
        assert executor.call_count == 1

    def test_empty_stderr_still_reports(self, tmp_path: Path):
        config = _project(tmp_path, "")
        executor = MockExecutor()
        executor.set_failure("python3", stderr="")
        result = run_install(config, executor=executor)
        assert result.error == "NonZeroExitError (no output)"

    def test_bad_config(self, tmp_path: Path):
        config = tmp_path / "reqbundle.yml"
        config.write_text("requirements: [1]\n")
        result = run_install(config, mock_mode=True)
        assert "'requirements' must be a mapping" in result.error


class TestRunPlan:
    def test_plan_does_not_write(self, tmp_path: Path):
        config = _project(tmp_path, "requirements:\n  post_install_command: strip-tests\n")
        result = run_plan(config)

        assert result.ok
        assert [p.kind for p in result.planned] == ["install", "post_install"]
        assert result.modules == ["."]
        assert not (tmp_path / ".reqbundle").exists()


class TestUnsplittableHook:
    HOOK_CONFIG = "requirements:\n  post_install_command: \"echo 'oops\"\n"

    def test_install_reports_config_error(self, tmp_path: Path):
        result = run_install(_project(tmp_path, self.HOOK_CONFIG), mock_mode=True)
        assert not result.ok
        assert "No closing quotation" in result.error

    def test_plan_reports_config_error(self, tmp_path: Path):
        result = run_plan(_project(tmp_path, self.HOOK_CONFIG))
        assert not result.ok
        assert "No closing quotation" in result.error

    def test_unit_hook(self, tmp_path: Path):
        body = "functions:\n  api:\n    post_install_command: \"strip 'x\"\n"
        result = run_plan(_project(tmp_path, body))
        assert "Invalid configuration" in result.error
