"""Search data models.

This module defines the core data structures shared by the mapping builder,
the matcher and the presentation helpers:
- Boundary: owner of a single transliteration letter
- SourceMappingData: immutable transliteration + boundary map of one string
- SearchOptions: knobs applied on top of the raw match
- MatchRange / Matrix: inclusive hit ranges in the original string
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List, NamedTuple, Optional, Tuple

# Inclusive (start, end) character indices into the original string.
MatchRange = Tuple[int, int]
Matrix = List[MatchRange]


class Boundary(NamedTuple):
    """Owner of one transliteration letter.

    Attributes:
        char_index: Index of the original character the letter belongs to.
        reading_start: Offset in ``pinyin_string`` where the letter's reading
            begins. A character with several readings has one offset per
            reading, so letters of competing readings never compare equal.
    """

    char_index: int
    reading_start: int


SENTINEL_BOUNDARY = Boundary(-1, -1)


@dataclass(frozen=True)
class SourceMappingData:
    """Transliteration of one source string with its boundary tables.

    Attributes:
        original_string: The source string as given.
        original_length: Number of characters in ``original_string``.
        pinyin_string: Concatenated lowercase readings, in source order. Han
            characters read as pinyin; other characters read as themselves.
        boundary: ``len(pinyin_string) + 1`` entries; entry 0 is a sentinel and
            entry ``k + 1`` describes letter ``k`` of ``pinyin_string``.
        original_indices: ``original_length + 1`` offsets; entry ``i`` is where
            character ``i`` starts in ``pinyin_string``. Strictly increasing,
            since every character owns at least one letter.

    Examples:
        >>> from pinyin_search.mapping import build_boundary_mapping
        >>> data = build_boundary_mapping("ab")
        >>> data.pinyin_string
        'ab'
        >>> data.original_indices
        (0, 1, 2)
    """

    original_string: str
    original_length: int
    pinyin_string: str
    boundary: Tuple[Boundary, ...]
    original_indices: Tuple[int, ...]

    def __post_init__(self) -> None:
        """Validate alignment invariants between the three tables."""
        object.__setattr__(self, "boundary", tuple(Boundary(*b) for b in self.boundary))
        object.__setattr__(self, "original_indices", tuple(self.original_indices))

        if self.original_length != len(self.original_string):
            raise ValueError(
                f"original_length={self.original_length} does not match "
                f"len(original_string)={len(self.original_string)}"
            )
        if len(self.boundary) != len(self.pinyin_string) + 1:
            raise ValueError("boundary must hold one entry per letter plus a sentinel")
        if len(self.original_indices) != self.original_length + 1:
            raise ValueError("original_indices must hold original_length + 1 entries")
        if self.pinyin_string != self.pinyin_string.lower():
            raise ValueError("pinyin_string must be lowercase")
        if self.original_indices[0] != 0 or self.original_indices[-1] != len(self.pinyin_string):
            raise ValueError("original_indices must span the whole pinyin_string")
        for prev, cur in zip(self.original_indices, self.original_indices[1:]):
            if cur <= prev:
                raise ValueError("original_indices must be increasing: every character owns a letter")
        letters = self.boundary[1:]
        for prev_b, cur_b in zip(letters, letters[1:]):
            if cur_b.char_index < prev_b.char_index:
                raise ValueError("boundary char indices must be non-decreasing")


@dataclass(frozen=True)
class SearchOptions:
    """Post-match rules applied by :func:`pinyin_search.search.search`.

    Attributes:
        strict_case: When False, query words are lowercased before fuzzy
            matching. The literal fast path is always case-sensitive.
        merge_spaces: Merge hit ranges separated only by whitespace.
        is_char_consecutive: Require all hits to form one contiguous run.
        strictness_coefficient: When set, reject matches with more than
            ``max(1, ceil(coefficient * query letters))`` ranges.
    """

    strict_case: bool = False
    merge_spaces: bool = False
    is_char_consecutive: bool = False
    strictness_coefficient: Optional[float] = None

    def __post_init__(self) -> None:
        """Validate field constraints."""
        coefficient = self.strictness_coefficient
        if coefficient is not None and (not math.isfinite(coefficient) or coefficient <= 0):
            raise ValueError(
                f"Invalid strictness_coefficient: {coefficient}. Must be finite and > 0."
            )


__all__ = [
    "Boundary",
    "SENTINEL_BOUNDARY",
    "SourceMappingData",
    "SearchOptions",
    "MatchRange",
    "Matrix",
]
