"""
Command builder — turn an install or hook request into a CommandSpec.

Natively the installer runs as-is. In container mode the same argv is
wrapped in a ``docker run`` that mounts the service at /var/task, runs
as a user that can write the output and pip cache, and optionally
forwards SSH credentials for private repositories.

The builder never starts the install itself. The only processes it
may trigger are the container helpers: an image build and, on
Windows hosts, the bind path check and uid lookup. Their results are
cached for the life of the builder.
"""

from __future__ import annotations

import logging
import ntpath
import os
import posixpath
import shlex

from reqbundle.core.context import InstallContext
from reqbundle.core.engine.paths import translate_path
from reqbundle.core.errors import InstallError
from reqbundle.core.models.command import CommandSpec

logger = logging.getLogger(__name__)

DOCKER = "docker"
CONTAINER_TASK_DIR = "/var/task"
CONTAINER_SSH_SOCK = "/tmp/ssh_sock"
HOOK_SHELL = "/bin/bash"


class CommandBuilder:
    """Builds fully specified install and post-install commands."""

    def __init__(self, context: InstallContext):
        self.context = context
        self.options = context.options
        self._image: str | None = None
        self._bind_path: str | None = None
        self._uid: str | None = None

    # ── Paths ───────────────────────────────────────────────────

    @property
    def pathmod(self):
        """Path flavour of the host the commands are built for."""
        return ntpath if self.context.is_windows else posixpath

    def join(self, *parts: str) -> str:
        """Join and normalize relative path parts for the host."""
        return self.pathmod.normpath(self.pathmod.join(*parts))

    def requirements_dir(self, target_root: str) -> str:
        return self.join(target_root, "requirements")

    def _translate(self, path: str) -> str:
        return translate_path(path, self.options, platform=self.context.platform)

    # ── Commands ────────────────────────────────────────────────

    def build_install_command(self, manifest_path: str, target_root: str) -> CommandSpec:
        """pip-install ``manifest_path`` into ``<target_root>/requirements``."""
        pip_cmd = [
            self.options.python_bin, "-m", "pip", "--isolated", "install",
            "-t", self._translate(self.requirements_dir(target_root)),
            "-r", self._translate(manifest_path),
            *self.options.pip_cmd_extra_args,
        ]
        return self._finalize(pip_cmd, use_shell=False)

    def build_post_install_command(
        self,
        hook_cmd: str,
        hook_args: tuple[str, ...] | list[str],
        target_root: str,
    ) -> CommandSpec:
        """Run ``hook_cmd <target_root>/requirements *hook_args``.

        Natively the hook runs without a shell. In a container it runs
        through ``/bin/bash -c`` as one ``shlex``-quoted string, which
        is the only place reqbundle hands anything to a shell.

        A native hook on a Windows host is split without POSIX escapes
        so backslashes in its path survive.
        """
        posix = not (self.context.is_windows and not self.options.dockerize_pip)
        try:
            hook = shlex.split(hook_cmd, posix=posix)
        except ValueError as e:
            raise InstallError(f"Invalid post_install_command {hook_cmd!r}: {e}") from e
        if not hook:
            raise InstallError("post_install_command is empty")
        argv = [*hook, self._translate(self.requirements_dir(target_root)), *hook_args]
        return self._finalize(argv, use_shell=True)

    def _finalize(self, argv: list[str], use_shell: bool) -> CommandSpec:
        cwd = str(self.context.service_path)
        if not self.options.dockerize_pip:
            return CommandSpec(executable=argv[0], args=tuple(argv[1:]), cwd=cwd)

        docker_args = self.docker_run_args()
        if use_shell:
            docker_args += [HOOK_SHELL, "-c", shlex.join(argv)]
        else:
            docker_args += argv
        return CommandSpec(
            executable=DOCKER,
            args=tuple(docker_args),
            cwd=cwd,
            containerized=True,
        )

    # ── Container setup ─────────────────────────────────────────

    def docker_run_args(self) -> list[str]:
        """``docker run`` options up to and including the image."""
        image = self.resolve_image()
        bind_path = self.resolve_bind_path()

        args = ["run", "--rm", "-v", f"{bind_path}:{CONTAINER_TASK_DIR}:z"]
        if self.options.docker_ssh:
            args += self._ssh_args()
        args += ["-u", self.resolve_uid()]
        args.append(image)
        return args

    def resolve_image(self) -> str:
        if self._image is None:
            if self.options.builds_image:
                logger.info("Building custom docker image from %s...", self.options.docker_file)
                self._image = self.context.engine.build_image(
                    self.options.docker_file, cwd=str(self.context.service_path)
                )
            else:
                self._image = self.options.docker_image
            logger.info("Docker Image: %s", self._image)
        return self._image

    def resolve_bind_path(self) -> str:
        if self._bind_path is None:
            self._bind_path = self.context.engine.bind_path(
                str(self.context.service_path), windows=self.context.is_windows
            )
        return self._bind_path

    def resolve_uid(self) -> str:
        """User to run as, so output and the pip cache are writable."""
        if self._uid is None:
            if self.context.is_posix_host:
                self._uid = str(os.getuid())
            else:
                self._uid = self.context.engine.container_uid(self.resolve_bind_path())
        return self._uid

    def _ssh_args(self) -> list[str]:
        environ = self.context.environ
        home = environ.get("HOME") or environ.get("USERPROFILE")
        agent_sock = environ.get("SSH_AUTH_SOCK")
        if not home or not agent_sock:
            raise InstallError(
                "docker_ssh needs HOME and SSH_AUTH_SOCK set (is ssh-agent running?)"
            )
        ssh_dir = f"{home}/.ssh"
        return [
            "-v", f"{ssh_dir}/id_rsa:/root/.ssh/id_rsa:z",
            "-v", f"{ssh_dir}/known_hosts:/root/.ssh/known_hosts:z",
            "-v", f"{agent_sock}:{CONTAINER_SSH_SOCK}:z",
            "-e", f"SSH_AUTH_SOCK={CONTAINER_SSH_SOCK}",
        ]
