"""pinyin-search: fuzzy pinyin search over mixed Chinese/Latin text.

Typical use is filtering labels while a user types pinyin initials::

    >>> from pinyin_search import search
    >>> search("北京大学", "bjdx")
    [(0, 3)]
"""

__all__ = [
    "__version__",
    "search",
    "search_entry",
    "filter_labels",
    "build_boundary_mapping",
    "highlight_text_with_ranges",
    "SearchOptions",
    "SourceMappingData",
]

__version__ = "0.1.0"

from .core.models import SearchOptions, SourceMappingData
from .highlight import highlight_text_with_ranges
from .mapping import build_boundary_mapping
from .search import filter_labels, search, search_entry
