"""boxdraw.grid
================

Mutable character buffer and the forward renderer. A :class:`Grid` owns a
``height x width`` numpy array of single-character cells addressed as
``(x, y)``; :meth:`Grid.execute` stamps one rectangle command onto it.

Bounds are the caller's responsibility. Every accessor checks them and raises
:class:`AssertionError` on violation, because an out-of-range coordinate is a
programming error, not something a picture can cause.
"""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING, Sequence, Tuple, Union

import numpy as np

from .constants import CORNER, DEFAULT_BACKGROUND, HORIZONTAL_EDGE, ROW_SEPARATOR, VERTICAL_EDGE
from .grid_utils import is_index, require, require_glyph
from .types import Glyph, ParseError

if TYPE_CHECKING:  # pragma: no cover
    from .script import Command

CELL_DTYPE = "<U1"


class Grid:
    """Rectangular buffer of glyphs representing a rendered picture."""

    def __init__(self, width: int, height: int, background: Glyph = DEFAULT_BACKGROUND) -> None:
        require(is_index(width), f"grid width must be an unsigned int, got {width!r}")
        require(is_index(height), f"grid height must be an unsigned int, got {height!r}")
        require(width * height <= sys.maxsize, f"grid of {width}x{height} cells is not addressable")
        require_glyph(background, "background")
        self.width = width
        self.height = height
        self._cells = np.full((height, width), background, dtype=CELL_DTYPE)

    # ------------------------------------------------------------------
    # Construction from text
    # ------------------------------------------------------------------
    @classmethod
    def from_rows(cls, rows: Sequence[str]) -> "Grid":
        """Build a grid from equal-length row strings."""

        width = len(rows[0]) if rows else 0
        for index, row in enumerate(rows):
            require(len(row) == width, f"row {index + 1} has {len(row)} characters, expected {width}")
        grid = cls(width, len(rows))
        if rows and width:
            grid._cells[:, :] = np.array([list(row) for row in rows], dtype=CELL_DTYPE)
        return grid

    @classmethod
    def from_text(cls, text: str) -> Union["Grid", ParseError]:
        """Parse ``text``; see :func:`boxdraw.parser.parse_grid`."""

        from .parser import parse_grid

        return parse_grid(text)

    # ------------------------------------------------------------------
    # Cell access
    # ------------------------------------------------------------------
    @property
    def dims(self) -> Tuple[int, int]:
        return self.height, self.width

    def _require_cell(self, x: int, y: int) -> None:
        require(
            is_index(x) and is_index(y) and x < self.width and y < self.height,
            f"cell ({x!r}, {y!r}) outside {self.width}x{self.height} grid",
        )

    def get(self, x: int, y: int) -> Glyph:
        self._require_cell(x, y)
        return str(self._cells[y, x])

    def set(self, x: int, y: int, glyph: Glyph) -> None:
        self._require_cell(x, y)
        require_glyph(glyph)
        self._cells[y, x] = glyph

    def to_array(self) -> np.ndarray:
        """Return a copy of the cell buffer, indexed ``[y, x]``."""

        return self._cells.copy()

    def copy(self) -> "Grid":
        clone = Grid(self.width, self.height)
        clone._cells = self._cells.copy()
        return clone

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------
    def execute(self, command: "Command") -> None:
        """Draw ``command`` onto the grid, overwriting whatever is underneath.

        Commands one cell wide or tall are solid lines of ``fill``. Anything
        larger gets ``+`` corners, ``-`` top and bottom edges, ``|`` side
        edges, and an interior of ``fill``.
        """

        x, y, w, h, fill = command.x, command.y, command.w, command.h, command.fill
        require(
            w > 0 and h > 0 and x + w <= self.width and y + h <= self.height,
            f"{command!r} does not fit a {self.width}x{self.height} grid",
        )
        cells = self._cells
        if w == 1 or h == 1:
            cells[y:y + h, x:x + w] = fill
            return

        right = x + w - 1
        bottom = y + h - 1
        cells[y, x + 1:right] = HORIZONTAL_EDGE
        cells[bottom, x + 1:right] = HORIZONTAL_EDGE
        cells[y + 1:bottom, x] = VERTICAL_EDGE
        cells[y + 1:bottom, right] = VERTICAL_EDGE
        cells[[y, y, bottom, bottom], [x, right, x, right]] = CORNER
        cells[y + 1:bottom, x + 1:right] = fill

    def to_text(self) -> str:
        """Serialise row-major, every row (the last included) ending in a separator."""

        return "".join("".join(row) + ROW_SEPARATOR for row in self._cells.tolist())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Grid):
            return NotImplemented
        return self.dims == other.dims and bool(np.array_equal(self._cells, other._cells))

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:  # pragma: no cover - debugging helper
        return f"Grid({self.width}x{self.height})"


__all__ = ["Grid", "CELL_DTYPE"]
