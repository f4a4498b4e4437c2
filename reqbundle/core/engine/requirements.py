"""
Requirements filter — drop denied packages from a manifest.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from pathlib import Path

from reqbundle.core.errors import ManifestReadError

logger = logging.getLogger(__name__)

# A requirement's name ends at the first comparator or whitespace.
_NAME_END = re.compile(r"[=<> \t]")
_LINE_SPLIT = re.compile(r"\r?\n")


def requirement_name(line: str) -> str:
    """Package name of one manifest line (no normalization)."""
    return _NAME_END.split(line, maxsplit=1)[0].strip()


def filter_lines(lines: Iterable[str], denied: Iterable[str]) -> list[str]:
    """Keep the lines whose package name is not denied."""
    denied_set = set(denied)
    return [line for line in lines if requirement_name(line) not in denied_set]


def filter_requirements(source: Path, destination: Path, denied: Iterable[str]) -> None:
    """Write ``source`` minus denied packages to ``destination``.

    ``destination`` may be ``source``. Filtering twice with the same
    denied set changes nothing.

    Raises:
        ManifestReadError: If ``source`` can't be read.
    """
    try:
        raw = Path(source).read_text(encoding="utf-8")
    except OSError as e:
        raise ManifestReadError(f"Cannot read requirements file {source}: {e}") from e

    lines = _LINE_SPLIT.split(raw)
    kept = filter_lines(lines, denied)
    dropped = len(lines) - len(kept)
    if dropped:
        logger.debug("Filtered %d denied requirement(s) from %s", dropped, source)

    destination = Path(destination)
    destination.parent.mkdir(parents=True, exist_ok=True)
    destination.write_text("\n".join(kept), encoding="utf-8")
