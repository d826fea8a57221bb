"""
Modification-time staleness check for generated files.
"""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path


def is_up_to_date(inputs: Iterable[Path], outputs: Iterable[Path]) -> bool:
    """
    True when every output exists and none is older than the newest input.

    An empty output list is never up to date.
    """
    outputs = list(outputs)
    if not outputs or not all(path.exists() for path in outputs):
        return False

    newest_input = max((path.stat().st_mtime for path in inputs if path.exists()), default=0.0)
    oldest_output = min(path.stat().st_mtime for path in outputs)
    return oldest_output >= newest_input
