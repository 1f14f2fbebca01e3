"""Plain-text output helpers for the CLI."""

from __future__ import annotations

import json
from typing import Any, Dict, List, Optional


def cell_text(value: Any) -> str:
    """Render a resolved value the way a sheet cell would show it."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    if isinstance(value, (dict, list)):
        return json.dumps(value, separators=(",", ":"), sort_keys=True)
    return str(value)


def table(headers: List[str], rows: List[List[Any]], max_widths: Optional[Dict[int, int]] = None) -> str:
    """Lay out rows as a left-aligned ASCII table, clipping columns in ``max_widths``."""
    if not rows:
        return "No data"

    cells = [[cell_text(value) for value in row] for row in rows]
    widths = [len(header) for header in headers]
    for row in cells:
        for index, text in enumerate(row[: len(widths)]):
            widths[index] = max(widths[index], len(text))
    for index, limit in (max_widths or {}).items():
        if index < len(widths):
            widths[index] = min(widths[index], limit)

    def line(values: List[str]) -> str:
        return "  ".join(value[: widths[i]].ljust(widths[i]) for i, value in enumerate(values[: len(widths)]))

    output = [line(headers), "  ".join("-" * width for width in widths)]
    output.extend(line(row) for row in cells)
    return "\n".join(output)
