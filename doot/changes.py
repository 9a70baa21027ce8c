"""Summary lines for links added and removed by an install."""

from __future__ import annotations

import os
from collections.abc import Iterable

SHOW_LIMIT = 5

_GREEN = "\x1b[32m"
_RED = "\x1b[31m"
_BOLD_GREEN = "\x1b[32;1m"
_BOLD_RED = "\x1b[31;1m"
_RESET = "\x1b[0m"


def order_and_limit(paths: Iterable[str], limit: int) -> list[str]:
    """The first ``limit`` paths in sorted order."""
    return sorted(paths)[:limit]


def _paint(text: str, code: str, color: bool) -> str:
    return f"{code}{text}{_RESET}" if color else text


def format_changes(
    added: list[str],
    removed: list[str],
    home: str | None = None,
    color: bool = False,
) -> list[str]:
    """Lines describing the changes, paths shown relative to ``home``."""
    if not added and not removed:
        return ["No changes made"]

    if home is None:
        home = os.path.expanduser("~")
    home_prefix = home + os.sep

    def shown(path: str) -> str:
        return path[len(home_prefix) :] if path.startswith(home_prefix) else path

    lines = [_paint(f"+ {shown(p)}", _GREEN, color) for p in order_and_limit(added, SHOW_LIMIT)]
    if len(added) > SHOW_LIMIT:
        lines.append(_paint(f"+ {len(added) - SHOW_LIMIT} more", _BOLD_GREEN, color))

    lines += [_paint(f"- {shown(p)}", _RED, color) for p in order_and_limit(removed, SHOW_LIMIT)]
    if len(removed) > SHOW_LIMIT:
        lines.append(_paint(f"- {len(removed) - SHOW_LIMIT} more", _BOLD_RED, color))
    return lines