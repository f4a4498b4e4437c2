"""
Filesystem adapter — the file and directory operations the engine needs.

Relative paths resolve against the service path, the same directory
commands run in, so the engine can speak in the relative paths it also
hands to pip.
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

logger = logging.getLogger(__name__)


class LocalFilesystem:
    """File and directory operations rooted at a base directory.

    Errors propagate as ``OSError``; callers decide what is fatal.
    """

    def __init__(self, root: Path):
        self.root = Path(root)

    def resolve(self, path: str | Path) -> Path:
        """Resolve a path relative to the root (absolute paths pass through)."""
        target = Path(path)
        if not target.is_absolute():
            target = self.root / target
        return target

    def exists(self, path: str | Path) -> bool:
        return self.resolve(path).exists()

    def ensure_dir(self, path: str | Path) -> Path:
        target = self.resolve(path)
        target.mkdir(parents=True, exist_ok=True)
        return target

    def list_dir(self, path: str | Path) -> list[str]:
        target = self.resolve(path)
        return sorted(p.name for p in target.iterdir())

    def remove_tree(self, path: str | Path) -> None:
        """Remove a file, symlink or directory tree if it exists."""
        target = self.resolve(path)
        if target.is_dir() and not target.is_symlink():
            shutil.rmtree(target)
        elif target.exists() or target.is_symlink():
            target.unlink()

    def copy_tree(self, source: str | Path, dest: str | Path) -> None:
        """Copy a file or a directory tree to ``dest``."""
        src = self.resolve(source)
        dst = self.resolve(dest)
        dst.parent.mkdir(parents=True, exist_ok=True)
        if src.is_dir():
            shutil.copytree(src, dst, symlinks=True)
        else:
            shutil.copy2(src, dst)
        logger.debug("Copied %s → %s", src, dst)
