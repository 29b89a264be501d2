"""Core enumerations used across the package."""

from __future__ import annotations

from enum import Enum


class StepKind(str, Enum):
    """How a matched transliteration letter relates to the chain it extends.

    Values are strings to ease logging and debugging output.
    """

    # Letter starts a reading of a character other than the previous one.
    NEW_WORD = "NEW_WORD"
    # Letter follows the previous matched letter inside the same reading.
    CONTINUATION = "CONTINUATION"


__all__ = ["StepKind"]
