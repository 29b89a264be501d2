"""Shared pytest fixtures for search tests."""

from typing import Callable, Sequence

import pytest

from pinyin_search.core.models import SourceMappingData
from pinyin_search.mapping import build_boundary_mapping, build_boundary_mapping_with_readings


def preset_mapping(source: str, readings: Sequence[Sequence[str]]) -> SourceMappingData:
    """Mapping with explicit readings, independent of the pypinyin dictionary."""
    return build_boundary_mapping_with_readings(source, readings)


def identity_mapping(source: str) -> SourceMappingData:
    """Mapping where every character reads as itself."""
    return build_boundary_mapping_with_readings(source, [[ch.lower()] for ch in source])


@pytest.fixture
def beijing_daxue() -> SourceMappingData:
    """北京大学 with single readings: bei jing da xue."""
    return preset_mapping("北京大学", [["bei"], ["jing"], ["da"], ["xue"]])


@pytest.fixture
def polyphonic_de() -> SourceMappingData:
    """的 with two readings sharing the initial: de, di."""
    return preset_mapping("的", [["de", "di"]])


@pytest.fixture
def preset_provider() -> Callable[[dict], Callable[[str], SourceMappingData]]:
    """Build a mapping provider from a {source: readings} table."""

    def _factory(table: dict) -> Callable[[str], SourceMappingData]:
        def _provider(source: str) -> SourceMappingData:
            if source in table:
                return preset_mapping(source, table[source])
            return build_boundary_mapping(source)

        return _provider

    return _factory
