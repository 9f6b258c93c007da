"""boxdraw.search
==================

Greedy reverse-peeling undraw. The last command of any script is entirely
visible in its picture, so the search works backwards: find a rectangle whose
every still-visible cell shows exactly the glyph that rectangle would draw,
peel it off (its cells become wildcards for the remaining search), and repeat
until only background is left. Reversing the peel order gives the script.

Peeling never invalidates a candidate, it only turns more cells into
wildcards, so greedy choice is safe. A 1x1 line is always consistent with its
own cell, which guarantees the search finishes with an exact reproduction; the
box candidates only decide how compact the resulting script is.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from functools import lru_cache
from itertools import combinations
from typing import Dict, Iterator, List, Optional, Sequence, Tuple

import numpy as np

from .constants import CORNER, DEFAULT_BACKGROUND
from .grid import Grid
from .grid_utils import dominant_glyph
from .parser import parse_grid
from .script import Command, Script, rect
from .types import Glyph, ParseError, Picture

# numpy strips trailing NULs from "<U1" cells, so the placeholder is a noncharacter.
FILL_PLACEHOLDER = "\uffff"

Box = Tuple[int, int, int, int]


# -----------------------------------------------------------------------------
# Configs
# -----------------------------------------------------------------------------
@dataclass
class SearchConfig:
    """Configuration knobs for the undraw search."""

    time_budget_s: float = 5.0
    background: Optional[Glyph] = None  # None: most frequent glyph, "." on ties
    use_boxes: bool = True
    verbose: bool = False


@dataclass
class SearchStats:
    time_elapsed: float = 0.0
    iterations: int = 0
    candidates: int = 0
    boxes_peeled: int = 0
    lines_peeled: int = 0
    budget_exhausted: bool = False


# -----------------------------------------------------------------------------
# Candidate generation
# -----------------------------------------------------------------------------
@lru_cache(maxsize=1024)
def box_template(w: int, h: int) -> np.ndarray:
    """Glyphs a ``w`` x ``h`` box draws, with :data:`FILL_PLACEHOLDER` for the fill.

    Rendered through :meth:`Grid.execute` so the search and the renderer can
    never disagree about what a box looks like. The array is read-only.
    """

    stencil = Grid(w, h, FILL_PLACEHOLDER)
    stencil.execute(rect(0, 0, w, h, FILL_PLACEHOLDER))
    cells = stencil.to_array()
    cells.setflags(write=False)
    return cells


def _expired(deadline: Optional[float]) -> bool:
    return deadline is not None and time.time() >= deadline


def _corner_pairs(groups: Dict[int, List[int]]) -> Iterator[Tuple[int, int, int]]:
    for line, positions in groups.items():
        for first, second in combinations(sorted(positions), 2):
            yield line, first, second


def box_candidates(target: np.ndarray, deadline: Optional[float] = None) -> List[Box]:
    """Enumerate ``(x, y, w, h)`` boxes with two visible corners on one edge.

    Every pair of ``+`` glyphs sharing a row is tried as a top and as a bottom
    edge, and every pair sharing a column as a left and a right edge, with the
    free extent ranging over the whole canvas. Boxes whose corners are all
    hidden are left to the line fallback.

    Enumeration stops once ``time.time()`` reaches ``deadline``; the boxes
    found so far are then returned unordered.
    """

    height, width = target.shape
    ys, xs = np.nonzero(target == CORNER)
    by_row: Dict[int, List[int]] = {}
    by_col: Dict[int, List[int]] = {}
    for y, x in zip(ys.tolist(), xs.tolist()):
        by_row.setdefault(y, []).append(x)
        by_col.setdefault(x, []).append(y)

    found = set()
    for y, x0, x1 in _corner_pairs(by_row):
        if _expired(deadline):
            return list(found)
        w = x1 - x0 + 1
        for h in range(2, height - y + 1):
            found.add((x0, y, w, h))
        for h in range(2, y + 2):
            found.add((x0, y - h + 1, w, h))
    for x, y0, y1 in _corner_pairs(by_col):
        if _expired(deadline):
            return list(found)
        h = y1 - y0 + 1
        for w in range(2, width - x + 1):
            found.add((x, y0, w, h))
        for w in range(2, x + 2):
            found.add((x - w + 1, y0, w, h))
    return sorted(found, key=lambda box: (box[1], box[0], box[3], box[2]))


# -----------------------------------------------------------------------------
# Consistency checks
# -----------------------------------------------------------------------------
def _corners_visible(rows: Sequence[str], covered: np.ndarray, box: Box) -> bool:
    x, y, w, h = box
    for cx, cy in ((x, y), (x + w - 1, y), (x, y + h - 1), (x + w - 1, y + h - 1)):
        if rows[cy][cx] != CORNER and not covered[cy, cx]:
            return False
    return True


def fit_box(target: np.ndarray, covered: np.ndarray, box: Box, background: Glyph) -> Optional[Glyph]:
    """Return the fill that makes ``box`` consistent with ``target``, or ``None``.

    Covered cells match anything. The fill comes from the visible interior;
    a box with no visible interior takes ``background``.
    """

    x, y, w, h = box
    region = target[y:y + h, x:x + w]
    visible = ~covered[y:y + h, x:x + w]
    template = box_template(w, h)
    border = template != FILL_PLACEHOLDER
    if np.any(visible & border & (region != template)):
        return None
    fills = np.unique(region[visible & ~border])
    if fills.size > 1:
        return None
    return str(fills[0]) if fills.size else background


def _best_box(
    target: np.ndarray,
    rows: Sequence[str],
    covered: np.ndarray,
    remaining: np.ndarray,
    pending: List[Box],
    background: Glyph,
    deadline: Optional[float] = None,
) -> Tuple[Optional[Command], List[Box]]:
    """Pick the consistent box uncovering the most cells; drop exhausted candidates.

    Past ``deadline`` the scan stops and the best box seen so far is returned,
    with the unscanned candidates kept.
    """

    best: Optional[Command] = None
    best_key = (0, 0)
    survivors: List[Box] = []
    for index, box in enumerate(pending):
        if _expired(deadline):
            survivors.extend(pending[index:])
            break
        x, y, w, h = box
        gain = int(remaining[y:y + h, x:x + w].sum())
        if gain == 0:
            continue
        survivors.append(box)
        key = (gain, w * h)
        if key <= best_key or not _corners_visible(rows, covered, box):
            continue
        fill = fit_box(target, covered, box, background)
        if fill is None:
            continue
        best = rect(x, y, w, h, fill)
        best_key = key
    return best, survivors


def _run_length(
    glyphs: Sequence[str],
    covered: Sequence[bool],
    remaining: Sequence[bool],
    glyph: Glyph,
) -> Tuple[int, int]:
    """Length and gain of the longest line of ``glyph`` from index 0, trimmed to its last gain."""

    length = 0
    gain = 0
    end = 0
    for cell, is_covered, is_remaining in zip(glyphs, covered, remaining):
        if not is_covered and cell != glyph:
            break
        length += 1
        if is_remaining:
            gain += 1
            end = length
    return end, gain


def best_line(target: np.ndarray, covered: np.ndarray, remaining: np.ndarray) -> Command:
    """Consistent horizontal or vertical line uncovering the most cells.

    Runs are started only where the previous cell in that direction does not
    continue the same visible glyph. Ties go to the earliest start in scan
    order, horizontal before vertical.
    """

    rows = target.tolist()
    cols = target.T.tolist()
    covered_rows = covered.tolist()
    covered_cols = covered.T.tolist()
    remaining_rows = remaining.tolist()
    remaining_cols = remaining.T.tolist()

    best: Optional[Command] = None
    best_gain = 0
    for y, x in np.argwhere(remaining).tolist():
        glyph = rows[y][x]
        if not (x and remaining_rows[y][x - 1] and rows[y][x - 1] == glyph):
            length, gain = _run_length(rows[y][x:], covered_rows[y][x:], remaining_rows[y][x:], glyph)
            if gain > best_gain:
                best, best_gain = rect(x, y, length, 1, glyph), gain
        if not (y and remaining_cols[x][y - 1] and cols[x][y - 1] == glyph):
            length, gain = _run_length(cols[x][y:], covered_cols[x][y:], remaining_cols[x][y:], glyph)
            if gain > best_gain:
                best, best_gain = rect(x, y, 1, length, glyph), gain
    if best is None:
        raise AssertionError("best_line called with nothing left to peel")
    return best


def first_line(target: np.ndarray, covered: np.ndarray, remaining: np.ndarray) -> Command:
    """Longest consistent line from the first unpeeled cell in scan order.

    Costs one row and one column per call, which keeps finishing a picture
    cheap once the time budget is spent.
    """

    y, x = (int(v) for v in np.unravel_index(int(np.argmax(remaining)), remaining.shape))
    glyph = str(target[y, x])
    across, across_gain = _run_length(
        target[y, x:].tolist(), covered[y, x:].tolist(), remaining[y, x:].tolist(), glyph
    )
    down, down_gain = _run_length(
        target[y:, x].tolist(), covered[y:, x].tolist(), remaining[y:, x].tolist(), glyph
    )
    if down_gain > across_gain:
        return rect(x, y, 1, down, glyph)
    return rect(x, y, across, 1, glyph)


# -----------------------------------------------------------------------------
# Search driver
# -----------------------------------------------------------------------------
def undraw_picture(picture: Picture, cfg: SearchConfig | None = None) -> Tuple[Script, SearchStats]:
    """Infer a script reproducing ``picture`` by reverse peeling.

    Raises :class:`ValueError` if ``picture`` does not parse. The returned
    script always renders with a trailing separator, so pictures without one
    can never round-trip exactly.
    """

    cfg = cfg or SearchConfig()
    parsed = parse_grid(picture)
    if isinstance(parsed, ParseError):
        raise ValueError(f"cannot undraw malformed picture: {parsed.describe()}")

    start = time.time()
    stats = SearchStats()
    target = parsed.to_array()
    height, width = target.shape
    background = cfg.background or dominant_glyph(target, prefer=DEFAULT_BACKGROUND) or DEFAULT_BACKGROUND
    rows = ["".join(row) for row in target.tolist()]
    covered = np.zeros(target.shape, dtype=bool)
    remaining = target != background

    deadline = start + cfg.time_budget_s
    pending = box_candidates(target, deadline) if cfg.use_boxes else []
    stats.candidates = len(pending)
    peeled: List[Command] = []

    while remaining.any():
        stats.iterations += 1
        command: Optional[Command] = None
        if pending and not stats.budget_exhausted:
            command, pending = _best_box(target, rows, covered, remaining, pending, background, deadline)
        if not stats.budget_exhausted and _expired(deadline):
            stats.budget_exhausted = True
            if cfg.verbose:
                print(f"[WARN] undraw budget of {cfg.time_budget_s}s exhausted; finishing with lines")
        if command is None:
            if stats.budget_exhausted:
                command = first_line(target, covered, remaining)
            else:
                command = best_line(target, covered, remaining)
            stats.lines_peeled += 1
        else:
            stats.boxes_peeled += 1
        region = (slice(command.y, command.y + command.h), slice(command.x, command.x + command.w))
        covered[region] = True
        remaining[region] = False
        peeled.append(command)

    stats.time_elapsed = time.time() - start
    if cfg.verbose:
        print(
            f"[SEARCH] undraw {width}x{height} bg={background!r}: "
            f"boxes={stats.boxes_peeled} lines={stats.lines_peeled} "
            f"candidates={stats.candidates} in {stats.time_elapsed:.3f}s"
        )
    return Script(width, height, background, reversed(peeled)), stats


class GreedyUndraw:
    """:class:`~boxdraw.oracle.Undraw` implementation backed by :func:`undraw_picture`."""

    def __init__(self, config: SearchConfig | None = None) -> None:
        self.config = config or SearchConfig()
        self.last_stats: SearchStats | None = None

    def undraw(self, picture: Picture) -> Script:
        cfg = SearchConfig(**self.config.__dict__)
        script, self.last_stats = undraw_picture(picture, cfg)
        return script


__all__ = [
    "SearchConfig",
    "SearchStats",
    "box_template",
    "box_candidates",
    "fit_box",
    "best_line",
    "first_line",
    "undraw_picture",
    "GreedyUndraw",
]
