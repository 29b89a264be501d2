"""Per-character readings used to build the transliteration.

- Han ideographs: pypinyin ``Style.NORMAL`` spellings (all of them when
  ``heteronym`` is set), reduced to lowercase a-z.
- Every other character (and a Han character pypinyin cannot read): its
  NFKC-normalized, lowercased self, so full-width ``Ａ`` reads as ``a``.

Every character owns at least one letter; hit ranges are derived from letter
counts and would drift over characters without one.
"""

from __future__ import annotations

import re
import unicodedata
from functools import lru_cache
from typing import Tuple

from pypinyin import Style, pinyin

_HAN_RE = re.compile(r"[\u3400-\u4dbf\u4e00-\u9fff\uf900-\ufaff]")
_NON_LETTER_RE = re.compile(r"[^a-z]+")


def is_han_char(char: str) -> bool:
    """True for CJK unified (and compatibility) ideographs."""
    return bool(_HAN_RE.fullmatch(char))


def fold_char(char: str) -> str:
    """NFKC-normalize and lowercase a character."""
    return unicodedata.normalize("NFKC", char).lower() or char


@lru_cache(maxsize=8192)
def get_char_readings(char: str, heteronym: bool = True) -> Tuple[str, ...]:
    """Return the distinct readings of a single character, in pypinyin order.

    Args:
        char: One character of the source string.
        heteronym: Include every reading of polyphonic characters.

    Returns:
        Non-empty tuple of lowercase spellings.

    Examples:
        >>> get_char_readings("中")
        ('zhong',)
        >>> get_char_readings("Ａ")
        ('a',)
        >>> get_char_readings("_")
        ('_',)
    """
    if len(char) != 1:
        raise ValueError(f"Expected a single character, got {char!r}")
    if not is_han_char(char):
        return (fold_char(char),)

    readings = []
    for spelling in pinyin(char, style=Style.NORMAL, heteronym=heteronym, errors="ignore"):
        for candidate in spelling:
            letters = _NON_LETTER_RE.sub("", candidate.lower())
            if letters and letters not in readings:
                readings.append(letters)
    return tuple(readings) or (fold_char(char),)
