from __future__ import annotations

import random
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import pytest

from boxdraw.grid import Grid
from boxdraw.parser import parse_grid
from boxdraw.script import Script, rect
from boxdraw.types import BadTerminationChar, ParseError, PrematureLineEnd


def test_premature_line_end_reports_row_and_partial():
    assert Grid.from_text("abc\nd") == PrematureLineEnd(row=2, partial="d", expected_width=3)


def test_bad_termination_char_reports_row_and_char():
    assert Grid.from_text("abc\ndefg") == BadTerminationChar(row=2, partial="def", unexpected_char="g")


def test_separator_inside_row_is_premature():
    assert parse_grid("abc\nd\nefg\n") == PrematureLineEnd(row=2, partial="d", expected_width=3)
    assert parse_grid("ab\ncd\n\n") == PrematureLineEnd(row=3, partial="", expected_width=2)


def test_error_on_later_row():
    result = parse_grid("ab\ncd\nef\nghi\n")
    assert isinstance(result, BadTerminationChar)
    assert (result.row, result.partial, result.unexpected_char) == (4, "gh", "i")


def test_errors_are_values_with_diagnostics():
    error = parse_grid("abc\nd")
    assert isinstance(error, ParseError)
    assert not isinstance(error, Grid)
    assert "row 2" in str(error)
    assert "3" in error.describe()
    assert "'g'" in parse_grid("abc\ndefg").describe()


def test_trailing_separator_is_optional():
    with_sep = parse_grid("abc\ndef\n")
    without_sep = parse_grid("abc\ndef")
    assert isinstance(with_sep, Grid)
    assert with_sep == without_sep
    assert with_sep.dims == (2, 3)
    assert without_sep.to_text() == "abc\ndef\n"


def test_single_row_without_separator():
    grid = parse_grid("abcd")
    assert isinstance(grid, Grid)
    assert (grid.width, grid.height) == (4, 1)
    assert grid.get(3, 0) == "d"


def test_empty_text_is_empty_grid():
    grid = parse_grid("")
    assert isinstance(grid, Grid)
    assert grid.dims == (0, 0)
    assert grid.to_text() == ""


def test_zero_width_rows():
    grid = parse_grid("\n\n")
    assert isinstance(grid, Grid)
    assert grid.dims == (2, 0)
    assert grid.to_text() == "\n\n"


def test_parsed_cells_are_addressable():
    grid = parse_grid(".+-+.\n.|b|.\n")
    assert isinstance(grid, Grid)
    assert grid.get(2, 1) == "b"
    assert grid.get(1, 0) == "+"
    with pytest.raises(AssertionError):
        grid.get(5, 0)


def test_rendered_pictures_reparse_identically():
    scripts = [
        Script(5, 3),
        Script.with_commands(5, 5, ".", [rect(1, 1, 3, 3, "b")]),
        Script.with_commands(5, 5, ".", [rect(0, 0, 3, 4, "b"), rect(1, 2, 3, 3, "c")]),
        Script.with_commands(7, 7, ".", [rect(1, 1, 4, 1, "b"), rect(2, 1, 1, 4, "c")]),
    ]
    for script in scripts:
        picture = script.run()
        grid = Grid.from_text(picture)
        assert isinstance(grid, Grid)
        assert grid.to_text() == picture


def test_random_uniform_text_roundtrips():
    rng = random.Random(1337)
    alphabet = ".+-|abc #"
    for _ in range(25):
        width = rng.randint(1, 9)
        height = rng.randint(1, 6)
        rows = ["".join(rng.choice(alphabet) for _ in range(width)) for _ in range(height)]
        text = "\n".join(rows)
        if rng.random() < 0.5:
            text += "\n"
        grid = parse_grid(text)
        assert isinstance(grid, Grid)
        assert grid.to_text() == "\n".join(rows) + "\n"
