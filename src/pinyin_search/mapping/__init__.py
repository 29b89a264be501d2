"""Transliteration and boundary-map construction."""

from .builder import (
    build_boundary_mapping,
    build_boundary_mapping_with_readings,
    get_cached_boundary_mapping,
)
from .readings import get_char_readings, is_han_char

__all__ = [
    "build_boundary_mapping",
    "build_boundary_mapping_with_readings",
    "get_cached_boundary_mapping",
    "get_char_readings",
    "is_han_char",
]
