"""
Path translation for commands that may run inside a container.
"""

from __future__ import annotations

import sys

from reqbundle.core.models.options import InstallationOptions


def translate_path(path: str, options: InstallationOptions, platform: str = sys.platform) -> str:
    """Rewrite ``path`` for the environment the installer runs in.

    Only a Windows host running pip in a container needs a rewrite, and
    only the first backslash is turned into ``/``. Paths handed to pip
    are short relative ones (``.reqbundle\\requirements``), which is
    the case this covers.
    """
    if platform == "win32" and options.dockerize_pip:
        return path.replace("\\", "/", 1)
    return path
