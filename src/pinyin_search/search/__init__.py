"""Search engine public API.

Exposes the matcher, the sentence orchestration and the entry points used by
the CLI layer.
"""

from .entry import apply_options, filter_labels, search, search_entry
from .matcher import search_by_boundary_mapping
from .sentence import search_sentence_by_boundary_mapping, search_with_index_of

__all__ = [
    "search",
    "search_entry",
    "filter_labels",
    "apply_options",
    "search_by_boundary_mapping",
    "search_sentence_by_boundary_mapping",
    "search_with_index_of",
]
