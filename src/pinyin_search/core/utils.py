"""Range utilities shared by the search orchestration and the presentation layer."""

from __future__ import annotations

from typing import Iterable, List, Tuple

from .models import MatchRange, Matrix


def get_rest_ranges(total_length: int, claimed: Iterable[MatchRange]) -> List[Tuple[int, int]]:
    """Return the parts of ``[0, total_length)`` not covered by ``claimed``.

    Args:
        total_length: Number of characters in the source string.
        claimed: Inclusive ``(start, end)`` ranges already assigned. Order and
            overlaps do not matter.

    Returns:
        Sorted, disjoint half-open ``(start, stop)`` ranges.

    Examples:
        >>> get_rest_ranges(10, [(2, 3), (7, 7)])
        [(0, 2), (4, 7), (8, 10)]
        >>> get_rest_ranges(3, [])
        [(0, 3)]
    """
    rest: List[Tuple[int, int]] = []
    cursor = 0
    for start, end in sorted(claimed):
        start = max(start, 0)
        if start > cursor:
            rest.append((cursor, min(start, total_length)))
        cursor = max(cursor, end + 1)
        if cursor >= total_length:
            break
    if cursor < total_length:
        rest.append((cursor, total_length))
    return [r for r in rest if r[0] < r[1]]


def merge_adjacent_ranges(ranges: Iterable[MatchRange]) -> Matrix:
    """Merge overlapping or touching inclusive ranges.

    Examples:
        >>> merge_adjacent_ranges([(3, 4), (0, 1), (2, 2), (6, 6)])
        [(0, 4), (6, 6)]
    """
    merged: Matrix = []
    for start, end in sorted(ranges):
        if merged and start <= merged[-1][1] + 1:
            merged[-1] = (merged[-1][0], max(merged[-1][1], end))
        else:
            merged.append((start, end))
    return merged


def merge_ranges_across_whitespace(source: str, ranges: Iterable[MatchRange]) -> Matrix:
    """Merge ranges whose gap in ``source`` consists only of whitespace.

    Examples:
        >>> merge_ranges_across_whitespace("ab  cd", [(0, 1), (4, 5)])
        [(0, 5)]
    """
    merged: Matrix = []
    for start, end in merge_adjacent_ranges(ranges):
        if merged:
            gap = source[merged[-1][1] + 1 : start]
            if gap.isspace():
                merged[-1] = (merged[-1][0], end)
                continue
        merged.append((start, end))
    return merged


def is_contiguous(ranges: Iterable[MatchRange]) -> bool:
    """True when the ranges cover a single uninterrupted run of characters."""
    return len(merge_adjacent_ranges(ranges)) <= 1
