"""Search configuration constants and the options file loader.

Constants here tune presentation and caching. Matching behavior itself is
controlled per call through :class:`SearchOptions`, which can also be read
from a YAML file shaped like ``config/search.yaml``::

    search:
      strict_case: false
      merge_spaces: true
      is_char_consecutive: false
      strictness_coefficient: 0.5
"""

from __future__ import annotations

from dataclasses import fields
from pathlib import Path
from typing import Any, Dict

import yaml

from pinyin_search.core.models import SearchOptions

# ============================================================================
# PRESENTATION
# ============================================================================

DEFAULT_HIGHLIGHT_OPEN = "["
DEFAULT_HIGHLIGHT_CLOSE = "]"
# Any colorlog escape code name ("bold_red", "yellow", "bg_blue", ...)
DEFAULT_HIGHLIGHT_COLOR = "bold_red"

# ============================================================================
# CACHING
# ============================================================================

# Number of source strings whose boundary mapping is kept by the default provider
MAPPING_CACHE_SIZE = 1024

# ============================================================================
# OPTIONS FILE
# ============================================================================

DEFAULT_CONFIG_PATH = Path("config/search.yaml")

_OPTION_FIELDS = {f.name for f in fields(SearchOptions)}


def options_from_mapping(data: Dict[str, Any]) -> SearchOptions:
    """Build SearchOptions from a plain mapping, rejecting unknown keys.

    Raises:
        ValueError: If a key is not a SearchOptions field, a flag is not a
            boolean, or the coefficient is not a positive finite number.

    Examples:
        >>> options_from_mapping({"merge_spaces": True}).merge_spaces
        True
    """
    unknown = sorted(set(data) - _OPTION_FIELDS)
    if unknown:
        raise ValueError(
            f"Unknown search option(s): {', '.join(unknown)}. "
            f"Valid options: {', '.join(sorted(_OPTION_FIELDS))}"
        )
    kwargs: Dict[str, Any] = {}
    for key, value in data.items():
        if key == "strictness_coefficient":
            if value is not None and (isinstance(value, bool) or not isinstance(value, (int, float))):
                raise ValueError(f"Invalid strictness_coefficient: {value!r}. Must be a number.")
            kwargs[key] = None if value is None else float(value)
        else:
            # Flags must be YAML booleans, not quoted strings or numbers.
            if not isinstance(value, bool):
                raise ValueError(f"Invalid value for {key}: {value!r}. Must be true or false.")
            kwargs[key] = value
    return SearchOptions(**kwargs)


def load_search_options(config_file: Path) -> SearchOptions:
    """Load SearchOptions from the ``search`` section of a YAML file.

    A missing or empty ``search`` section yields default options.

    Raises:
        FileNotFoundError: If ``config_file`` does not exist.
        ValueError: If the document or its ``search`` section is not a mapping,
            or contains unknown keys.
    """
    if not config_file.exists():
        raise FileNotFoundError(f"Search config file not found: {config_file}")
    with config_file.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Search config must be a mapping: {config_file}")
    section = data.get("search") or {}
    if not isinstance(section, dict):
        raise ValueError(f"'search' section must be a mapping: {config_file}")
    return options_from_mapping(section)
