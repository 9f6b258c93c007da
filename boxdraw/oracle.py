"""boxdraw.oracle
==================

The undraw capability and the round-trip check that validates it. Any object
with an ``undraw(picture) -> Script`` method can be plugged in; the only
measure of correctness is whether running the returned script reproduces the
picture byte for byte.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Protocol, Union

from .grid_utils import diff_pictures
from .script import Script
from .types import Picture


class Undraw(Protocol):
    """Inverse of drawing: given a picture, create a script to draw it.

    Implementations receive the picture text exactly as the caller holds it and
    must return a script whose :meth:`~boxdraw.script.Script.run` output equals
    that text, trailing separator included.
    """

    def undraw(self, picture: Picture) -> Script:
        """Return a script that reproduces ``picture``."""


@dataclass(frozen=True)
class Mismatch:
    """Failed round trip: ``script`` renders ``produced`` instead of ``goal``."""

    script: Script
    goal: Picture
    produced: Picture

    def diff(self) -> Dict[str, Any]:
        return diff_pictures(self.produced, self.goal)

    def describe(self) -> str:
        """Multi-line report with the script, both pictures and the cell diff."""

        diff = self.diff()
        lines = [
            f"undraw mismatch: {diff['mismatch_count']} cell(s) differ",
            f"script: {self.script!r}",
            "goal:",
            self.goal.rstrip("\n"),
            "produced:",
            self.produced.rstrip("\n"),
            "diff:",
            diff["ascii"],
        ]
        if diff["mismatch_count"] == 0:
            lines[0] = "undraw mismatch: row separators differ"
        return "\n".join(lines)

    def __str__(self) -> str:
        return self.describe()


def check_undraw(picture: Picture, undraw_impl: Undraw) -> Union[Script, Mismatch]:
    """Run ``undraw_impl`` on ``picture`` and verify the result reproduces it."""

    script = undraw_impl.undraw(picture)
    produced = script.run()
    if produced == picture:
        return script
    return Mismatch(script=script, goal=picture, produced=produced)


__all__ = ["Undraw", "Mismatch", "check_undraw"]
