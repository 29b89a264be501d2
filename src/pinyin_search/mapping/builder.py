"""Build :class:`SourceMappingData` for a source string.

The mapping is computed once per string and never mutated, so it can be
cached and shared between any number of searches.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Iterable, List, Sequence

from pinyin_search.config import MAPPING_CACHE_SIZE
from pinyin_search.core.models import SENTINEL_BOUNDARY, Boundary, SourceMappingData
from .readings import get_char_readings

logger = logging.getLogger(__name__)


def build_boundary_mapping_with_readings(
    source: str, readings: Sequence[Iterable[str]]
) -> SourceMappingData:
    """Build a mapping from preset readings, one sequence per character.

    Readings of the same character are concatenated in the given order; every
    letter records its character and the offset where its reading starts.

    Args:
        source: The original string.
        readings: ``len(source)`` non-empty sequences of lowercase spellings.

    Returns:
        The immutable mapping for ``source``.

    Raises:
        ValueError: If ``readings`` is not aligned with ``source``, a character
            has no reading, or a reading is empty or not lowercase.

    Examples:
        >>> data = build_boundary_mapping_with_readings("的a", [["de", "di"], ["a"]])
        >>> data.pinyin_string
        'dedia'
        >>> data.original_indices
        (0, 4, 5)
    """
    if len(readings) != len(source):
        raise ValueError(
            f"Expected {len(source)} reading groups for {source!r}, got {len(readings)}"
        )

    parts: List[str] = []
    boundary: List[Boundary] = [SENTINEL_BOUNDARY]
    original_indices: List[int] = []
    offset = 0
    for char_index, char_readings in enumerate(readings):
        original_indices.append(offset)
        char_readings = list(char_readings)
        if not char_readings:
            raise ValueError(f"Character {source[char_index]!r} has no reading")
        for reading in char_readings:
            if not reading or reading != reading.lower():
                raise ValueError(
                    f"Invalid reading {reading!r} for character {source[char_index]!r}"
                )
            boundary.extend(Boundary(char_index, offset) for _ in reading)
            parts.append(reading)
            offset += len(reading)
    original_indices.append(offset)

    return SourceMappingData(
        original_string=source,
        original_length=len(source),
        pinyin_string="".join(parts),
        boundary=tuple(boundary),
        original_indices=tuple(original_indices),
    )


def build_boundary_mapping(source: str, *, heteronym: bool = True) -> SourceMappingData:
    """Build a mapping using pypinyin readings for Han characters.

    Other characters map to themselves, NFKC-normalized and lowercased.

    Examples:
        >>> build_boundary_mapping("中A_").pinyin_string
        'zhonga_'
    """
    readings = [get_char_readings(char, heteronym) for char in source]
    data = build_boundary_mapping_with_readings(source, readings)
    logger.debug(
        "Built boundary mapping for %r: %d chars -> %d letters",
        source,
        data.original_length,
        len(data.pinyin_string),
    )
    return data


@lru_cache(maxsize=MAPPING_CACHE_SIZE)
def get_cached_boundary_mapping(source: str) -> SourceMappingData:
    """Cached :func:`build_boundary_mapping`; the default mapping provider."""
    return build_boundary_mapping(source)
