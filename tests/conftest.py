"""
Shared test fixtures and configuration.
"""

from pathlib import Path

import pytest

from reqbundle.adapters.mock import MockExecutor
from reqbundle.core.context import InstallContext
from reqbundle.core.models.command import CommandSpec
from reqbundle.core.models.options import InstallationOptions


def fake_pip(spec: CommandSpec, cwd: str) -> None:
    """Side effect that lays down one package the way pip -t would."""
    args = list(spec.args)
    if "pip" not in args or "-t" not in args:
        return
    target = Path(cwd) / args[args.index("-t") + 1]
    (target / "fakepkg").mkdir(parents=True, exist_ok=True)
    (target / "fakepkg" / "__init__.py").write_text("")


@pytest.fixture
def service_dir(tmp_path: Path) -> Path:
    """A service directory with a root requirements.txt."""
    service = tmp_path / "service"
    service.mkdir()
    (service / "requirements.txt").write_text("numpy==1.2.3\nboto3\nsimplejson>=3.0")
    return service


@pytest.fixture
def mock_executor() -> MockExecutor:
    """A mock executor that simulates pip installing one package."""
    return MockExecutor(side_effect=fake_pip)


@pytest.fixture
def make_context(service_dir: Path, mock_executor: MockExecutor):
    """Factory for install contexts over ``service_dir``."""

    def _make(**option_overrides) -> InstallContext:
        options = InstallationOptions(python_bin="python3", **option_overrides)
        return InstallContext(
            service_path=service_dir,
            options=options,
            executor=mock_executor,
            platform="linux",
            environ={"HOME": "/home/dev", "SSH_AUTH_SOCK": "/run/agent.sock"},
        )

    return _make
