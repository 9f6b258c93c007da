"""Public package interface for boxdraw."""

from .grid import Grid
from .oracle import Mismatch, Undraw, check_undraw
from .parser import parse_grid
from .script import Command, Script, rect
from .search import GreedyUndraw, SearchConfig, undraw_picture
from .types import BadTerminationChar, ParseError, PrematureLineEnd

__all__ = [
    "Grid",
    "parse_grid",
    "Command",
    "Script",
    "rect",
    "ParseError",
    "PrematureLineEnd",
    "BadTerminationChar",
    "Undraw",
    "Mismatch",
    "check_undraw",
    "GreedyUndraw",
    "SearchConfig",
    "undraw_picture",
]
