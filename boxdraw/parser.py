"""boxdraw.parser
=================

Text picture to :class:`~boxdraw.grid.Grid`. The format has no header: the
width is the length of the first row and the height is however many full rows
follow. A trailing separator after the last row is optional.
"""

from __future__ import annotations

from typing import List, Union

from .constants import ROW_SEPARATOR
from .grid import Grid
from .types import BadTerminationChar, ParseError, PrematureLineEnd


def parse_grid(text: str) -> Union[Grid, ParseError]:
    """Parse ``text`` into a grid, or return the first malformed row.

    Rows are consumed ``width`` characters at a time. Running out of input at
    the start of a row ends parsing normally; running out (or meeting a
    separator) part way through a row yields :class:`PrematureLineEnd`; and a
    full row followed by anything but a separator or the end of input yields
    :class:`BadTerminationChar`. Row numbers are 1-based.
    """

    first_break = text.find(ROW_SEPARATOR)
    width = len(text) if first_break < 0 else first_break
    end = len(text)
    rows: List[str] = []
    pos = 0

    while pos < end:
        row = len(rows) + 1
        partial = text[pos:pos + width]
        cut = partial.find(ROW_SEPARATOR)
        if cut >= 0:
            return PrematureLineEnd(row, partial[:cut], width)
        if len(partial) < width:
            return PrematureLineEnd(row, partial, width)
        rows.append(partial)
        pos += width
        if pos == end:
            break
        if text[pos] != ROW_SEPARATOR:
            return BadTerminationChar(row, partial, text[pos])
        pos += 1

    return Grid.from_rows(rows)


__all__ = ["parse_grid"]
