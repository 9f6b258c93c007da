from __future__ import annotations

from collections import Counter
from typing import Any, Dict, List, Optional, Tuple

import numpy as np

from .constants import COORD_MAX, ROW_SEPARATOR
from .types import Glyph, Picture


# ---------------------------------------------------------------------------
# Contract checks
# ---------------------------------------------------------------------------
def require(condition: bool, message: str) -> None:
    """Raise :class:`AssertionError` with ``message`` unless ``condition`` holds.

    Contract violations signal a caller bug rather than bad data, so they are
    never folded into the returned error values. The explicit ``raise`` keeps
    the checks alive under ``python -O``.
    """

    if not condition:
        raise AssertionError(message)


def is_index(value: Any) -> bool:
    """True for plain non-negative ints within :data:`COORD_MAX`."""

    return isinstance(value, int) and not isinstance(value, bool) and 0 <= value <= COORD_MAX


def require_glyph(glyph: Any, what: str = "glyph") -> None:
    require(
        isinstance(glyph, str) and len(glyph) == 1,
        f"{what} must be a single character, got {glyph!r}",
    )
    # "<U1" cells read a stored NUL back as the empty string.
    require(glyph != "\0", f"{what} cannot be NUL")


# ---------------------------------------------------------------------------
# Picture-level helpers
# ---------------------------------------------------------------------------
def picture_rows(text: Picture) -> List[str]:
    """Split ``text`` into rows, tolerating a missing trailing separator."""

    if not text:
        return []
    rows = text.split(ROW_SEPARATOR)
    if text.endswith(ROW_SEPARATOR):
        rows.pop()
    return rows


def picture_dims(text: Picture) -> Tuple[int, int]:
    """Return ``(height, width)`` of ``text``; ragged rows report the widest."""

    rows = picture_rows(text)
    if not rows:
        return 0, 0
    return len(rows), max(len(row) for row in rows)


def _cell(rows: List[str], x: int, y: int) -> Optional[Glyph]:
    if y < len(rows) and x < len(rows[y]):
        return rows[y][x]
    return None


def generate_ascii_diff(produced: Picture, goal: Picture) -> str:
    """Human-readable diff: goal glyph where both agree, ``X`` where they differ.

    Cells present on only one side are shown as ``?``.
    """

    produced_rows = picture_rows(produced)
    goal_rows = picture_rows(goal)
    height = max(len(produced_rows), len(goal_rows))
    width = max([len(row) for row in produced_rows + goal_rows] or [0])
    lines: List[str] = []
    for y in range(height):
        row_chars: List[str] = []
        for x in range(width):
            got = _cell(produced_rows, x, y)
            want = _cell(goal_rows, x, y)
            if got == want:
                row_chars.append(" " if want is None else want)
            elif got is None or want is None:
                row_chars.append("?")
            else:
                row_chars.append("X")
        lines.append("".join(row_chars).rstrip())
    return "\n".join(lines)


def diff_pictures(produced: Picture, goal: Picture) -> Dict[str, Any]:
    """Compute structured, JSON-safe difference information between two pictures.

    Coordinates are reported as ``[x, y]`` pairs. Rows or columns that exist in
    only one of the pictures count as mismatches as well, so a script of the
    wrong size never reports ``mismatch_count == 0``.
    """

    produced_rows = picture_rows(produced)
    goal_rows = picture_rows(goal)
    height = max(len(produced_rows), len(goal_rows))

    mismatch_coords: List[List[int]] = []
    mismatch_produced: Dict[str, int] = {}
    mismatch_goal: Dict[str, int] = {}

    for y in range(height):
        got_row = produced_rows[y] if y < len(produced_rows) else ""
        want_row = goal_rows[y] if y < len(goal_rows) else ""
        for x in range(max(len(got_row), len(want_row))):
            got = _cell(produced_rows, x, y)
            want = _cell(goal_rows, x, y)
            if got != want:
                mismatch_coords.append([x, y])
                if got is not None:
                    mismatch_produced[got] = mismatch_produced.get(got, 0) + 1
                if want is not None:
                    mismatch_goal[want] = mismatch_goal.get(want, 0) + 1

    return {
        "dims_produced": list(picture_dims(produced)),
        "dims_goal": list(picture_dims(goal)),
        "trailing_separator": [produced.endswith(ROW_SEPARATOR), goal.endswith(ROW_SEPARATOR)],
        "mismatch_coords": mismatch_coords,
        "mismatch_count": len(mismatch_coords),
        "mismatch_produced": mismatch_produced,
        "mismatch_goal": mismatch_goal,
        "ascii": generate_ascii_diff(produced, goal),
    }


def dominant_glyph(cells: np.ndarray, prefer: Optional[Glyph] = None) -> Optional[Glyph]:
    """Return the most frequent glyph of ``cells``.

    Ties go to ``prefer`` when it is among the leaders, otherwise to the
    lexicographically smallest glyph. Empty arrays return ``prefer``.
    """

    if cells.size == 0:
        return prefer
    counts = Counter(str(glyph) for glyph in cells.ravel().tolist())
    top = max(counts.values())
    leaders = sorted(glyph for glyph, count in counts.items() if count == top)
    if prefer in leaders:
        return prefer
    return leaders[0]


__all__ = [
    "require",
    "is_index",
    "require_glyph",
    "picture_rows",
    "picture_dims",
    "generate_ascii_diff",
    "diff_pictures",
    "dominant_glyph",
]
