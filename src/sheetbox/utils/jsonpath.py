"""Bracketed path parsing and querying for message payloads.

Paths are written as a run of bracketed segments, ``[Sheet1][msg-7][customer]``.
An empty pair of brackets stands for an omitted segment (for instance the
"current" message of a sheet).
"""

from __future__ import annotations

import re
from typing import Any, Iterable, List, Sequence

_PATH_PATTERN = re.compile(r"^(\[[^\[\]]*\])+$")
_SEGMENT_PATTERN = re.compile(r"\[([^\[\]]*)\]")


def parse(value: Any) -> List[Any]:
    """Split a path value into its segments; non-path values yield an empty list."""
    if isinstance(value, (list, tuple)):
        return list(value)
    if not isinstance(value, str):
        return []
    text = value.strip()
    if not _PATH_PATTERN.match(text):
        return []
    return _SEGMENT_PATTERN.findall(text)


def to_path(segments: Iterable[Any]) -> str:
    """Render segments back into the bracketed form accepted by :func:`parse`."""
    return "".join(f"[{'' if segment is None else segment}]" for segment in segments)


def query(path: Sequence[Any], obj: Any) -> Any:
    """Follow ``path`` into nested dicts/lists; any miss returns None."""
    current = obj
    for segment in path:
        if current is None:
            return None
        if isinstance(current, dict):
            if segment in current:
                current = current[segment]
            elif str(segment) in current:
                current = current[str(segment)]
            else:
                return None
        elif isinstance(current, list):
            try:
                index = int(segment)
            except (TypeError, ValueError):
                return None
            if index < 0 or index >= len(current):
                return None
            current = current[index]
        else:
            return None
    return current
