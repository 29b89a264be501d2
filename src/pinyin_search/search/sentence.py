"""Literal search and multi-word sentence placement."""

from __future__ import annotations

import logging
from typing import Optional

from pinyin_search.core.models import Matrix, SourceMappingData
from pinyin_search.core.utils import get_rest_ranges
from .matcher import search_by_boundary_mapping

logger = logging.getLogger(__name__)


def search_with_index_of(source: str, target: str) -> Optional[Matrix]:
    """Return the range of the leftmost literal occurrence of ``target``.

    Examples:
        >>> search_with_index_of("hello world", "o w")
        [(4, 6)]
        >>> search_with_index_of("hello", "") is None
        True
    """
    if not target:
        return None
    start = source.find(target)
    if start < 0:
        return None
    return [(start, start + len(target) - 1)]


def search_sentence_by_boundary_mapping(
    data: SourceMappingData, sentence: str, *, strict_case: bool = True
) -> Optional[Matrix]:
    """Place every whitespace-separated word of ``sentence`` in disjoint ranges.

    Words are placed left to right in query order; each word takes the first
    not-yet-claimed range where it matches. One unplaceable word fails the
    whole sentence.

    Args:
        data: Mapping of the source string.
        sentence: Query, possibly containing whitespace.
        strict_case: When False, words are lowercased before fuzzy matching.

    Returns:
        Hit ranges in placement order, or ``None``.
    """
    trimmed = sentence.strip()
    if not trimmed:
        return None
    literal = search_with_index_of(data.original_string, trimmed)
    if literal:
        return literal

    hits: Matrix = []
    for word in trimmed.split():
        if not strict_case:
            word = word.lower()
        rest_ranges = get_rest_ranges(data.original_length, hits)
        if not rest_ranges:
            return None
        for start, stop in rest_ranges:
            word_hits = search_by_boundary_mapping(data, word, start, stop)
            if word_hits:
                hits.extend(word_hits)
                break
        else:
            logger.debug("Word %r has no placement in %r", word, data.original_string)
            return None
    return hits
