"""Public search entry points.

``search_entry`` is the bare contract: literal match first, then the
transliteration-based sentence search. ``search`` adds the default cached
mapping provider and :class:`SearchOptions` post-processing, and
``filter_labels`` applies it to a list of candidate strings.
"""

from __future__ import annotations

import logging
import math
from typing import Callable, Iterable, List, Optional, Tuple

from pinyin_search.core.models import Matrix, SearchOptions, SourceMappingData
from pinyin_search.core.utils import is_contiguous, merge_ranges_across_whitespace
from pinyin_search.mapping.builder import get_cached_boundary_mapping
from .sentence import search_sentence_by_boundary_mapping, search_with_index_of

logger = logging.getLogger(__name__)

MappingProvider = Callable[[str], SourceMappingData]


def search_entry(
    source: str,
    target: str,
    get_boundary_mapping: MappingProvider,
    *,
    strict_case: bool = True,
) -> Optional[Matrix]:
    """Search ``target`` in ``source``, building the mapping only when needed.

    Examples:
        >>> from pinyin_search.mapping import build_boundary_mapping
        >>> search_entry("中国人", "zgr", build_boundary_mapping)
        [(0, 2)]
    """
    if not target or not target.strip():
        return None
    literal = search_with_index_of(source, target)
    if literal:
        return literal
    return search_sentence_by_boundary_mapping(
        get_boundary_mapping(source), target, strict_case=strict_case
    )


def _count_letters(query: str) -> int:
    return sum(1 for ch in query if not ch.isspace())


def apply_options(
    source: str, query: str, hits: Matrix, options: SearchOptions
) -> Optional[Matrix]:
    """Apply merge and rejection rules to a raw match."""
    if options.merge_spaces:
        hits = merge_ranges_across_whitespace(source, hits)
    if options.is_char_consecutive and not is_contiguous(hits):
        logger.debug("Rejected %r in %r: hits are not consecutive", query, source)
        return None
    if options.strictness_coefficient is not None:
        limit = max(1, math.ceil(options.strictness_coefficient * _count_letters(query)))
        if len(hits) > limit:
            logger.debug(
                "Rejected %r in %r: %d ranges exceed limit %d", query, source, len(hits), limit
            )
            return None
    return hits


def search(
    source: str,
    query: str,
    boundary_mapping_provider: Optional[MappingProvider] = None,
    *,
    options: Optional[SearchOptions] = None,
) -> Optional[Matrix]:
    """Search ``query`` in ``source`` and return inclusive hit ranges or ``None``.

    Args:
        source: String to search in.
        query: Latin-letter query; whitespace separates words.
        boundary_mapping_provider: Builds the mapping of ``source``. Defaults to
            the cached pypinyin-based builder.
        options: Post-match rules; defaults to ``SearchOptions()``.

    Examples:
        >>> search("北京大学", "bjdx")
        [(0, 3)]
        >>> search("北京大学", "shanghai") is None
        True
    """
    options = options or SearchOptions()
    provider = boundary_mapping_provider or get_cached_boundary_mapping
    hits = search_entry(source, query, provider, strict_case=options.strict_case)
    if hits is None:
        return None
    return apply_options(source, query, hits, options)


def filter_labels(
    labels: Iterable[str],
    query: str,
    *,
    options: Optional[SearchOptions] = None,
    boundary_mapping_provider: Optional[MappingProvider] = None,
) -> List[Tuple[str, Matrix]]:
    """Keep the labels that match ``query``, in input order, with their hits."""
    matched: List[Tuple[str, Matrix]] = []
    for label in labels:
        hits = search(label, query, boundary_mapping_provider, options=options)
        if hits is not None:
            matched.append((label, hits))
    return matched
