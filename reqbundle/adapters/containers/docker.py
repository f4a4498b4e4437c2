"""
Docker adapter — the container engine collaborator.

Builds custom images, finds a bind-mount path docker accepts, and
looks up the numeric owner of a mounted directory. Uses the docker
CLI through an executor, never the Docker API directly.
"""

from __future__ import annotations

import logging
import re

from reqbundle.adapters.base import Executor
from reqbundle.core.errors import InstallError
from reqbundle.core.models.command import CommandSpec

logger = logging.getLogger(__name__)

DOCKER = "docker"
CUSTOM_IMAGE_TAG = "reqbundle-custom"
HELPER_IMAGE = "alpine"
UNRESOLVED_UID = "<container-uid>"


class DockerEngine:
    """Container engine operations that run outside the install itself.

    Every call goes through the executor, so a missing docker binary
    surfaces as the same ToolMissingError the install would raise.
    """

    def __init__(self, executor: Executor, output_dir: str = ".reqbundle"):
        self.executor = executor
        self.output_dir = output_dir

    def _docker(self, args: list[str], cwd: str = ".") -> str:
        """Run a docker command and return stripped stdout."""
        spec = CommandSpec(executable=DOCKER, args=tuple(args), cwd=cwd, containerized=True)
        outcome = self.executor.execute(spec)
        outcome.raise_for_status()
        return outcome.stdout.strip()

    # ── Operations ──────────────────────────────────────────────

    def build_image(self, docker_file: str, cwd: str = ".") -> str:
        """Build an image from ``docker_file`` and return its tag."""
        self._docker(["build", "-f", docker_file, "-t", CUSTOM_IMAGE_TAG, "."], cwd=cwd)
        return CUSTOM_IMAGE_TAG

    def bind_path(self, service_path: str, windows: bool = False) -> str:
        """Return the spelling of ``service_path`` docker can mount.

        POSIX hosts mount the path as-is. Windows hosts try the
        plain, git-bash and upper-cased drive spellings in turn and
        keep the first one docker actually sees content through.
        """
        if not windows:
            return service_path

        for candidate in bind_path_candidates(service_path):
            if self._try_bind_path(candidate):
                return candidate
        raise InstallError("Unable to find good bind path format")

    def _try_bind_path(self, path: str) -> bool:
        expected = f"/test/{self.output_dir}"
        spec = CommandSpec(
            executable=DOCKER,
            args=("run", "--rm", "-v", f"{path}:/test", HELPER_IMAGE, "ls", "-d", expected),
            containerized=True,
        )
        outcome = self.executor.execute(spec)
        if outcome.status == "tool_missing":
            outcome.raise_for_status()
        found = outcome.ok and outcome.stdout.strip() == expected
        logger.debug("Bind path %s %s", path, "works" if found else "rejected")
        return found

    def container_uid(self, bind_path: str) -> str:
        """Numeric owner of the bind-mounted directory, as docker sees it."""
        return self._docker(
            ["run", "--rm", "-v", f"{bind_path}:/test", HELPER_IMAGE, "stat", "-c", "%u", "/test"]
        )


def bind_path_candidates(service_path: str) -> list[str]:
    """Docker-mountable spellings of a Windows path, most likely first.

    Accepts ``C:\\x``, ``C:/x``, git-bash ``/c/x`` and cygwin ``/mnt/c/x``.
    """
    base = re.sub(r"\\([^\s])", r"/\1", service_path)
    candidates = [base]

    path = base
    if path.startswith("/mnt/"):
        path = path[len("/mnt"):]

    if len(path) > 1 and path[1] == ":":
        drive, rest = path[0], path[3:]
    elif len(path) > 2 and path[0] == "/" and path[2] == "/":
        drive, rest = path[1], path[3:]
    else:
        raise InstallError(f"Unknown path format {base[:10]}...")

    for candidate in (f"/{drive.lower()}/{rest}", f"{drive.upper()}:/{rest}"):
        if candidate not in candidates:
            candidates.append(candidate)
    return candidates


class DryRunDockerEngine(DockerEngine):
    """Engine for plans: no lookup runs in docker.

    Image builds still go through the executor (a mock, in a plan) so
    the plan shows the tag. The bind path is the first candidate and
    the uid is a placeholder docker would resolve at install time.
    """

    def bind_path(self, service_path: str, windows: bool = False) -> str:
        if not windows:
            return service_path
        return bind_path_candidates(service_path)[0]

    def container_uid(self, bind_path: str) -> str:
        return UNRESOLVED_UID
