"""boxdraw.script
==================

Rectangle commands and the scripts that sequence them. A :class:`Script` is
the unit the rest of the package trades in: undraw strategies produce one, the
oracle runs one, and the mismatch log serialises one.

Appending is the single place where a command is checked against the canvas,
so every script in existence only ever holds commands that fit.
"""

from __future__ import annotations

import hashlib
import json
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Iterator, List, Tuple

from .constants import COORD_MAX, DEFAULT_BACKGROUND
from .grid import Grid
from .grid_utils import is_index, require, require_glyph
from .types import Glyph


@dataclass(frozen=True)
class Command:
    """Draw a ``w`` x ``h`` rectangle at (``x``, ``y``) filled with ``fill``.

    The fill only shows where there is room for it: boxes at least 3x3 get an
    interior, boxes one cell wide or tall are drawn entirely in ``fill``.
    """

    x: int
    y: int
    w: int
    h: int
    fill: Glyph

    def __post_init__(self) -> None:
        require(is_index(self.x) and is_index(self.y), f"position ({self.x!r}, {self.y!r}) must be unsigned ints")
        require(is_index(self.w) and self.w > 0, f"width must be a positive int, got {self.w!r}")
        require(is_index(self.h) and self.h > 0, f"height must be a positive int, got {self.h!r}")
        require_glyph(self.fill, "fill")

    @property
    def is_line(self) -> bool:
        """True for degenerate rectangles drawn without a border."""

        return self.w == 1 or self.h == 1

    def to_dict(self) -> Dict[str, Any]:
        return {"x": self.x, "y": self.y, "w": self.w, "h": self.h, "fill": self.fill}

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "Command":
        return cls(int(payload["x"]), int(payload["y"]), int(payload["w"]), int(payload["h"]), str(payload["fill"]))

    def __repr__(self) -> str:
        return f"rect({self.x}, {self.y}, {self.w}, {self.h}, {self.fill!r})"


def rect(x: int, y: int, w: int, h: int, fill: Glyph) -> Command:
    """Build a :class:`Command`; ``w`` and ``h`` must be positive."""

    return Command(x, y, w, h, fill)


def _check_span(position: int, length: int, limit: int, axis: str) -> None:
    require(length > 0, f"{axis} extent must be positive, got {length}")
    require(position <= COORD_MAX - length, f"{axis} span {position}+{length} overflows")
    require(position + length <= limit, f"{axis} span {position}..{position + length} exceeds canvas size {limit}")


class Script:
    """Ordered rectangle commands plus the canvas they are drawn on."""

    def __init__(
        self,
        width: int,
        height: int,
        background: Glyph = DEFAULT_BACKGROUND,
        commands: Iterable[Command] = (),
    ) -> None:
        require(is_index(width) and is_index(height), f"canvas size {width!r}x{height!r} must be unsigned ints")
        require_glyph(background, "background")
        self.width = width
        self.height = height
        self.background = background
        self._commands: List[Command] = []
        self._signature_cache: str | None = None
        for command in commands:
            self.append(command)

    @classmethod
    def with_commands(
        cls,
        width: int,
        height: int,
        background: Glyph,
        commands: Iterable[Command],
    ) -> "Script":
        """Create a script and validate-append ``commands`` in order."""

        return cls(width, height, background, commands)

    def append(self, command: Command) -> None:
        """Append ``command`` after checking it fits the canvas."""

        require(isinstance(command, Command), f"expected Command, got {type(command).__name__}")
        _check_span(command.x, command.w, self.width, "x")
        _check_span(command.y, command.h, self.height, "y")
        self._commands.append(command)
        self._signature_cache = None

    @property
    def commands(self) -> Tuple[Command, ...]:
        """The command sequence, in render order."""

        return tuple(self._commands)

    def run(self) -> str:
        """Evaluate the script, producing the text of the picture."""

        grid = Grid(self.width, self.height, self.background)
        for command in self._commands:
            grid.execute(command)
        return grid.to_text()

    # ------------------------------------------------------------------
    # Fingerprints and serialisation
    # ------------------------------------------------------------------
    def to_dict(self) -> Dict[str, Any]:
        return {
            "width": self.width,
            "height": self.height,
            "background": self.background,
            "commands": [command.to_dict() for command in self._commands],
        }

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "Script":
        commands = [Command.from_dict(item) for item in payload.get("commands", [])]
        return cls(
            int(payload["width"]),
            int(payload["height"]),
            str(payload.get("background", DEFAULT_BACKGROUND)),
            commands,
        )

    def signature(self) -> str:
        """Return a structural fingerprint of the script."""

        if self._signature_cache is None:
            blob = json.dumps(self.to_dict(), sort_keys=True, separators=(",", ":"))
            self._signature_cache = hashlib.md5(blob.encode()).hexdigest()
        return self._signature_cache

    def short_signature(self) -> str:
        return self.signature()[:12]

    def __len__(self) -> int:
        return len(self._commands)

    def __iter__(self) -> Iterator[Command]:
        return iter(self.commands)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Script):
            return NotImplemented
        return (
            (self.width, self.height, self.background) == (other.width, other.height, other.background)
            and self._commands == other._commands
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        body = ", ".join(repr(command) for command in self._commands)
        return f"Script({self.width}x{self.height}, bg={self.background!r}, [{body}])"


__all__ = ["Command", "rect", "Script"]
