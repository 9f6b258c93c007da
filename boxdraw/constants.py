"""boxdraw.constants
=====================

Global constants shared by the renderer, the parser and the search. Keeping
them here avoids import cycles between modules and makes the glyph vocabulary
easy to discover.
"""

from __future__ import annotations

# ---------------------------------------------------------------------------
# Glyphs
# ---------------------------------------------------------------------------
CORNER = "+"
HORIZONTAL_EDGE = "-"
VERTICAL_EDGE = "|"
BORDER_GLYPHS = frozenset({CORNER, HORIZONTAL_EDGE, VERTICAL_EDGE})

DEFAULT_BACKGROUND = "."
ROW_SEPARATOR = "\n"

# Coordinates and extents are unsigned 32-bit quantities.
COORD_MAX = 2**32 - 1

MISMATCH_LOG = "mismatches.jsonl"

__all__ = [
    "CORNER",
    "HORIZONTAL_EDGE",
    "VERTICAL_EDGE",
    "BORDER_GLYPHS",
    "DEFAULT_BACKGROUND",
    "ROW_SEPARATOR",
    "COORD_MAX",
    "MISMATCH_LOG",
]
