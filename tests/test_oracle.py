from __future__ import annotations

import json
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import pytest

from boxdraw.grid_utils import diff_pictures, dominant_glyph, generate_ascii_diff, picture_dims, picture_rows
from boxdraw.logging_utils import load_mismatch_log, log_mismatch
from boxdraw.oracle import Mismatch, check_undraw
from boxdraw.grid import Grid
from boxdraw.script import Script, rect


class FixedUndraw:
    """Returns the same script whatever it is shown."""

    def __init__(self, script: Script) -> None:
        self.script = script
        self.seen = []

    def undraw(self, picture: str) -> Script:
        self.seen.append(picture)
        return self.script


class BrokenUndraw:
    def undraw(self, picture: str) -> Script:
        raise RuntimeError("search exploded")


BOX = ".....\n.+-+.\n.|b|.\n.+-+.\n"


def test_check_undraw_returns_script_on_exact_match():
    script = Script.with_commands(5, 4, ".", [rect(1, 1, 3, 3, "b")])
    impl = FixedUndraw(script)
    assert check_undraw(BOX, impl) is script
    assert impl.seen == [BOX]


def test_check_undraw_reports_mismatch():
    script = Script.with_commands(5, 4, ".", [rect(1, 1, 3, 3, "c")])
    result = check_undraw(BOX, FixedUndraw(script))
    assert isinstance(result, Mismatch)
    assert result.script is script
    assert result.goal == BOX
    assert result.produced == script.run()
    diff = result.diff()
    assert diff["mismatch_count"] == 1
    assert diff["mismatch_coords"] == [[2, 2]]
    assert diff["mismatch_produced"] == {"c": 1}
    assert diff["mismatch_goal"] == {"b": 1}


def test_mismatch_on_wrong_canvas_size():
    result = check_undraw(BOX, FixedUndraw(Script(5, 3)))
    assert isinstance(result, Mismatch)
    diff = result.diff()
    assert diff["dims_produced"] == [3, 5]
    assert diff["dims_goal"] == [4, 5]
    assert diff["mismatch_count"] > 0


def test_missing_trailing_separator_is_a_mismatch():
    script = Script.with_commands(5, 4, ".", [rect(1, 1, 3, 3, "b")])
    result = check_undraw(BOX.rstrip("\n"), FixedUndraw(script))
    assert isinstance(result, Mismatch)
    assert result.diff()["mismatch_count"] == 0
    assert result.describe().startswith("undraw mismatch: row separators differ")


def test_mismatch_describe_shows_both_pictures():
    script = Script.with_commands(5, 4, ".", [rect(1, 1, 3, 3, "c")])
    report = str(check_undraw(BOX, FixedUndraw(script)))
    assert "1 cell(s) differ" in report
    assert "goal:\n" + BOX.rstrip("\n") in report
    assert ".|X|." in report
    assert "rect(1, 1, 3, 3, 'c')" in report


def test_undraw_exceptions_propagate():
    with pytest.raises(RuntimeError):
        check_undraw(BOX, BrokenUndraw())


def test_log_mismatch_appends_json_lines(tmp_path: Path):
    log_path = str(tmp_path / "mismatches.jsonl")
    script = Script.with_commands(5, 4, ".", [rect(1, 1, 3, 3, "c")])
    mismatch = check_undraw(BOX, FixedUndraw(script))
    assert isinstance(mismatch, Mismatch)

    log_mismatch(mismatch, path=log_path, label="box-c")
    log_mismatch(mismatch, path=log_path)

    lines = Path(log_path).read_text().splitlines()
    assert len(lines) == 2
    first = json.loads(lines[0])
    assert first["label"] == "box-c"
    assert first["goal"] == BOX
    assert first["mismatch_count"] == 1
    assert first["signature"] == script.short_signature()

    entries = load_mismatch_log(log_path)
    assert Script.from_dict(entries[1]["script"]) == script


def test_load_missing_log_is_empty(tmp_path: Path):
    assert load_mismatch_log(str(tmp_path / "absent.jsonl")) == []


def test_picture_rows_and_dims():
    assert picture_rows("ab\ncd\n") == ["ab", "cd"]
    assert picture_rows("ab\ncd") == ["ab", "cd"]
    assert picture_rows("") == []
    assert picture_dims("ab\ncde\n") == (2, 3)
    assert picture_dims("") == (0, 0)


def test_ascii_diff_marks_changes_and_gaps():
    assert generate_ascii_diff(".+.\n", "...\n") == ".X."
    assert generate_ascii_diff("ab\n", "ab\ncd\n") == "ab\n??"


def test_diff_pictures_is_json_safe():
    diff = diff_pictures(".+.\n", "...\n")
    assert json.loads(json.dumps(diff)) == diff
    assert diff["mismatch_coords"] == [[1, 0]]
    assert diff["trailing_separator"] == [True, True]


def test_dominant_glyph_prefers_requested_on_ties():
    grid = Grid.from_text("..ab\nab..\n")
    assert isinstance(grid, Grid)
    assert dominant_glyph(grid.to_array(), prefer=".") == "."
    tied = Grid.from_text("ab\nba\n")
    assert isinstance(tied, Grid)
    assert dominant_glyph(tied.to_array(), prefer=".") == "a"
    assert dominant_glyph(Grid(0, 0).to_array(), prefer=".") == "."
