"""Adapters — bindings for processes, the filesystem and docker.

Public re-exports for convenient access.
"""

from reqbundle.adapters.base import Executor
from reqbundle.adapters.containers.docker import DockerEngine
from reqbundle.adapters.mock import MockExecutor
from reqbundle.adapters.shell.command import CommandExecutor
from reqbundle.adapters.shell.filesystem import LocalFilesystem

__all__ = [
    "CommandExecutor",
    "DockerEngine",
    "Executor",
    "LocalFilesystem",
    "MockExecutor",
]
