# src/gred/core/UIComponent.py
"""Base class for everything that owns a rectangle of the screen."""

import logging
from typing import Any

from .geometry import Size


class UIComponent:
    """A screen area that redraws itself only when marked dirty.

    Subclasses implement ``set_size`` and ``draw``.
    """

    def __init__(self) -> None:
        self.size = Size()
        self._needs_redraw = True

    def set_needs_redraw(self, value: bool = True) -> None:
        self._needs_redraw = value

    def needs_redraw(self) -> bool:
        return self._needs_redraw

    def set_size(self, size: Size) -> None:
        self.size = size

    def resize(self, size: Size) -> None:
        self.set_size(size)
        self.set_needs_redraw(True)

    def render(self, renderer: Any, origin_row: int) -> None:
        """Draws the component if needed, starting at `origin_row`.

        A drawing failure is logged and the component stays dirty so the
        next frame tries again.
        """
        if not self.needs_redraw():
            return
        try:
            self.draw(renderer, origin_row)
        except Exception as e:
            logging.error(f"Could not render {type(self).__name__}: {e}", exc_info=True)
            return
        self.set_needs_redraw(False)

    def draw(self, renderer: Any, origin_row: int) -> None:
        raise NotImplementedError
