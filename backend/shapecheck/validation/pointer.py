"""Pointer-style path joining for findings and faults."""
from __future__ import annotations

from typing import Iterable


def escape_segment(segment: str | int) -> str:
    """Escape one path segment: ``~`` first, then ``/``."""
    return str(segment).replace("~", "~0").replace("/", "~1")


def pointer_join(parts: Iterable[str | int]) -> str:
    """Join segments into a rooted pointer path.

    An empty sequence yields the root path ``""``.

        >>> pointer_join(["properties", "a/b", 0])
        '/properties/a~1b/0'
    """
    return "".join(f"/{escape_segment(part)}" for part in parts)
