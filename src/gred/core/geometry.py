# src/gred/core/geometry.py
"""Coordinate value types shared by the buffer, the view and the renderer.

Three spaces are involved when drawing text:

- ``Location``: a place in the document (line index, grapheme index).
- ``Position``: a place on the grid of display cells (row, column),
  either in document space or relative to the viewport.
- ``Size``: the dimensions of a rectangular area in cells.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class Location:
    """A cursor location in the document, counted in lines and graphemes."""

    line_idx: int = 0
    grapheme_idx: int = 0


@dataclass(frozen=True)
class Position:
    """A cell on the display grid."""

    row: int = 0
    col: int = 0

    def saturating_sub(self, other: "Position") -> "Position":
        """Subtracts `other` component-wise, stopping at zero."""
        return Position(max(0, self.row - other.row), max(0, self.col - other.col))


@dataclass(frozen=True)
class Size:
    height: int = 0
    width: int = 0
