"""Boundary-aware alignment of one query word against a transliteration.

The matcher walks the transliteration once per query letter. A letter can
only extend a chain when it either starts a reading of a new character or
continues the same reading of the character already being matched, so a hit
like ``zg`` on ``中国`` lands on the initials and never on the ``g`` inside
``zhong``. Each accepted letter adds ``2 * chain_length + 1`` to the score,
which favors fewer, longer runs over scattered single letters.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence, Tuple

from pinyin_search.core.enums import StepKind
from pinyin_search.core.models import Boundary, Matrix, SourceMappingData

logger = logging.getLogger(__name__)

# (matched characters, matched letters, relative char index, relative reading start)
DpState = Tuple[int, int, int, int]
# (range start, range end, letters consumed), relative to the slice
PathCell = Tuple[int, int, int]

VIRGIN_STATE: DpState = (0, 0, -1, -1)


def find_anchors(pinyin: str, target: str) -> Optional[List[int]]:
    """Return the earliest in-order position of every target letter.

    Necessary but not sufficient for a match; ``None`` when some letter has
    no remaining occurrence.

    Examples:
        >>> find_anchors("tetmplpimpo", "emp")
        [1, 3, 4]
        >>> find_anchors("abc", "ca") is None
        True
    """
    anchors: List[int] = []
    for position, letter in enumerate(pinyin):
        if len(anchors) == len(target):
            break
        if letter == target[len(anchors)]:
            anchors.append(position)
    return anchors if len(anchors) == len(target) else None


def classify_step(
    position: int,
    state: DpState,
    char_index: int,
    reading_start: int,
    pinyin: str,
    target: str,
    letter_index: int,
) -> Optional[StepKind]:
    """Decide whether the letter at ``position`` may extend ``state``.

    ``position`` is 1-based (letter ``position - 1`` of the slice); indices are
    relative to the slice.
    """
    matched_chars, _, prev_char, prev_reading = state
    if position - 1 == reading_start and prev_char != char_index:
        return StepKind.NEW_WORD
    if (
        matched_chars > 0
        and prev_reading == reading_start
        and position >= 2
        and letter_index >= 1
        and pinyin[position - 2] == target[letter_index - 1]
    ):
        return StepKind.CONTINUATION
    return None


def _stays_in_character(
    position: int, gap: int, boundary: Sequence[Boundary], pinyin_length: int
) -> bool:
    if gap == 0:
        return True
    return (
        gap == 1
        and position < pinyin_length - 1
        and boundary[position].char_index == boundary[position + 1].char_index
    )


def align(
    pinyin: str, boundary: Sequence[Boundary], target: str, anchors: Sequence[int]
) -> List[Optional[PathCell]]:
    """Run the scoring DP and return the path cells at the last position.

    ``boundary`` must hold ``len(pinyin) + 1`` entries where entry ``k + 1``
    owns letter ``k``. Cell ``i`` of the result describes the run that ends
    query letter ``i``, or ``None`` when no alignment reached it.
    """
    pinyin_length = len(pinyin)
    target_length = len(target)
    start_char = boundary[1].char_index
    start_reading = boundary[1].reading_start

    table: List[DpState] = [VIRGIN_STATE] * (pinyin_length + 1)
    scores: List[int] = [0] * (pinyin_length + 1)
    paths: List[List[Optional[PathCell]]] = [
        [None] * target_length for _ in range(pinyin_length + 1)
    ]

    for letter_index, anchor in enumerate(anchors):
        letter = target[letter_index]
        # State and score of the previous letter row, one position back.
        prev_state = table[anchor]
        prev_row_score = scores[anchor]
        scores[anchor] = 0
        table[anchor] = VIRGIN_STATE

        for position in range(anchor + 1, pinyin_length + 1):
            prev_score = prev_row_score
            state = prev_state
            prev_state = table[position]
            prev_row_score = scores[position]

            char_index = boundary[position].char_index - start_char
            reading_start = boundary[position].reading_start - start_reading

            if pinyin[position - 1] == letter and (letter_index == 0 or prev_score > 0):
                kind = classify_step(
                    position, state, char_index, reading_start, pinyin, target, letter_index
                )
                if kind is not None:
                    matched_chars, matched_letters = state[0], state[1]
                    score = prev_score + matched_letters * 2 + 1
                    if score >= scores[position - 1]:
                        is_new_word = kind is StepKind.NEW_WORD
                        scores[position] = score
                        table[position] = (
                            matched_chars + int(is_new_word),
                            matched_letters + 1,
                            char_index,
                            reading_start,
                        )
                        if score > scores[position - 1]:
                            paths[position][letter_index] = (
                                char_index - matched_chars + int(not is_new_word),
                                char_index,
                                matched_letters + 1,
                            )
                        else:
                            # Equal score keeps the earlier path.
                            paths[position][letter_index] = paths[position - 1][letter_index]
                        continue

            scores[position] = scores[position - 1]
            paths[position][letter_index] = paths[position - 1][letter_index]
            gap = char_index - table[position - 1][2]
            if _stays_in_character(position, gap, boundary, pinyin_length):
                table[position] = table[position - 1]
            else:
                table[position] = VIRGIN_STATE

    return paths[pinyin_length]


def backtrack(final_cells: Sequence[Optional[PathCell]], base: int) -> Optional[Matrix]:
    """Rebuild the hit ranges from the last-position path cells."""
    hits: Matrix = []
    letter_index = len(final_cells) - 1
    while letter_index >= 0:
        cell = final_cells[letter_index]
        if cell is None:
            return None
        start, end, consumed = cell
        hits.append((start + base, end + base))
        letter_index -= consumed
    hits.reverse()
    return hits


def search_by_boundary_mapping(
    data: SourceMappingData, target: str, start_index: int, end_index: int
) -> Optional[Matrix]:
    """Align ``target`` against original characters ``[start_index, end_index)``.

    Args:
        data: Mapping of the source string.
        target: A single query word (no whitespace).
        start_index: First original character of the searched range.
        end_index: Exclusive end of the range; may equal ``data.original_length``.

    Returns:
        Inclusive hit ranges covering every letter of ``target`` in order, or
        ``None`` when the word cannot be placed in the range.

    Examples:
        >>> from pinyin_search.mapping import build_boundary_mapping
        >>> data = build_boundary_mapping("no_node")
        >>> search_by_boundary_mapping(data, "nod", 0, data.original_length)
        [(3, 5)]
    """
    if not target or not data.original_length:
        return None
    offset = data.original_indices[start_index]
    stop = data.original_indices[end_index]
    pinyin = data.pinyin_string[offset:stop]
    if len(pinyin) < len(target):
        return None
    boundary = data.boundary[offset : stop + 1]

    anchors = find_anchors(pinyin, target)
    if anchors is None:
        logger.debug("No anchors for %r in %r", target, pinyin)
        return None

    final_cells = align(pinyin, boundary, target, anchors)
    if final_cells[-1] is None:
        logger.debug("Alignment exhausted for %r in %r", target, pinyin)
        return None
    return backtrack(final_cells, boundary[1].char_index)
