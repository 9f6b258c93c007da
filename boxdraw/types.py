"""boxdraw.types
=================

Foundational type aliases and the parse-result records used throughout the
package. The module stays definitions-only so that importing it never triggers
runtime side effects.

Parse failures are modelled as plain values rather than exceptions: a
malformed picture is an ordinary input, and callers are expected to inspect the
returned record (row number, partial row text, offending character) and report
it however they see fit.
"""

from __future__ import annotations

from dataclasses import dataclass

# ---------------------------------------------------------------------------
# Core representations
# ---------------------------------------------------------------------------
Glyph = str
Picture = str


@dataclass(frozen=True)
class ParseError:
    """Common base for the parser's failure variants.

    Parameters
    ----------
    row:
        1-based number of the row being consumed when parsing stopped.
    partial:
        Characters of that row read before the failure.
    """

    row: int
    partial: str

    def describe(self) -> str:
        return f"row {self.row}: malformed picture after {self.partial!r}"

    def __str__(self) -> str:
        return self.describe()


@dataclass(frozen=True)
class PrematureLineEnd(ParseError):
    """A row ended before reaching ``expected_width`` characters."""

    expected_width: int

    def describe(self) -> str:
        return (
            f"row {self.row}: line ended after {len(self.partial)} of "
            f"{self.expected_width} characters ({self.partial!r})"
        )


@dataclass(frozen=True)
class BadTerminationChar(ParseError):
    """A full row was followed by something other than a separator or the end."""

    unexpected_char: Glyph

    def describe(self) -> str:
        return (
            f"row {self.row}: expected end of line after {self.partial!r}, "
            f"found {self.unexpected_char!r}"
        )


__all__ = [
    "Glyph",
    "Picture",
    "ParseError",
    "PrematureLineEnd",
    "BadTerminationChar",
]
