"""Render hit ranges for display.

Presentation only; the matcher never depends on this module.
"""

from __future__ import annotations

from typing import Iterable

from colorlog.escape_codes import escape_codes

from pinyin_search.config import (
    DEFAULT_HIGHLIGHT_CLOSE,
    DEFAULT_HIGHLIGHT_COLOR,
    DEFAULT_HIGHLIGHT_OPEN,
)
from pinyin_search.core.models import MatchRange, Matrix
from pinyin_search.core.utils import merge_adjacent_ranges


def _clip(source: str, ranges: Iterable[MatchRange]) -> Matrix:
    last = len(source) - 1
    clipped = [(max(start, 0), min(end, last)) for start, end in ranges]
    return merge_adjacent_ranges(r for r in clipped if r[0] <= r[1])


def highlight_text_with_ranges(
    source: str,
    ranges: Iterable[MatchRange],
    open_mark: str = DEFAULT_HIGHLIGHT_OPEN,
    close_mark: str = DEFAULT_HIGHLIGHT_CLOSE,
) -> str:
    """Wrap every inclusive range of ``source`` in markers.

    Touching ranges are merged first, so consecutive hits read as one span.

    Examples:
        >>> highlight_text_with_ranges("tetmplpimpo", [(1, 1), (3, 4)])
        't[e]t[mp]lpimpo'
        >>> highlight_text_with_ranges("北京大学", [(0, 1), (2, 3)], "<b>", "</b>")
        '<b>北京大学</b>'
    """
    out = []
    cursor = 0
    for start, end in _clip(source, ranges):
        out.append(source[cursor:start])
        out.append(f"{open_mark}{source[start:end + 1]}{close_mark}")
        cursor = end + 1
    out.append(source[cursor:])
    return "".join(out)


def colorize_text_with_ranges(
    source: str, ranges: Iterable[MatchRange], color: str = DEFAULT_HIGHLIGHT_COLOR
) -> str:
    """Highlight ranges with ANSI colors from colorlog's escape code table.

    Raises:
        ValueError: If ``color`` is not a known escape code name.
    """
    if color not in escape_codes:
        raise ValueError(f"Unknown highlight color: {color}")
    return highlight_text_with_ranges(source, ranges, escape_codes[color], escape_codes["reset"])
