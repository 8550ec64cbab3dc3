# src/gred/ui/Terminal.py
"""Terminal.py
========================
Terminal: the curses renderer used by the editor.

It is responsible for:
- printing plain, reverse-video and annotated rows,
- mapping annotation types to colour pairs from the configuration,
- placing, hiding and showing the caret,
- flushing a finished frame with double buffering.

Every curses call that can fail on small or exotic terminals is guarded;
errors are logged and the frame carries on.
"""

import curses
import logging
from typing import Any, Optional

from gred.core.AnnotatedString import AnnotatedString, AnnotationType
from gred.core.geometry import Position, Size
from gred.core.Line import display_width


COLOR_NAMES = {
    "default": -1,
    "black": curses.COLOR_BLACK,
    "red": curses.COLOR_RED,
    "green": curses.COLOR_GREEN,
    "yellow": curses.COLOR_YELLOW,
    "blue": curses.COLOR_BLUE,
    "magenta": curses.COLOR_MAGENTA,
    "cyan": curses.COLOR_CYAN,
    "white": curses.COLOR_WHITE,
}

# Used when the terminal has no colours or a pair cannot be created.
MONOCHROME_ATTRIBUTES = {
    AnnotationType.MATCH: curses.A_UNDERLINE,
    AnnotationType.SELECTED_MATCH: curses.A_REVERSE,
    AnnotationType.KEYWORD: curses.A_BOLD,
}


## ================= class Terminal ==============================
class Terminal:
    """Draws rows of text onto a curses window.

    Args:
        stdscr: The main curses window.
        config: Merged configuration; ``config["colors"]`` maps annotation
            type names to ``[foreground, background]`` colour names.
    """

    def __init__(self, stdscr: "curses.window", config: Optional[dict[str, Any]] = None) -> None:
        self.stdscr = stdscr
        self.config = config or {}
        self.colors: dict[AnnotationType, int] = {}
        self._init_colors()

    def _init_colors(self) -> None:
        """Creates one colour pair per configured annotation type."""
        self.colors = dict(MONOCHROME_ATTRIBUTES)
        try:
            if not curses.has_colors():
                logging.debug("Terminal has no colours, using monochrome attributes")
                return
            curses.use_default_colors()
        except curses.error as e:
            logging.warning(f"Colour initialisation failed ({e}), using monochrome attributes")
            return

        color_config = self.config.get("colors", {})
        for pair_number, annotation_type in enumerate(AnnotationType, start=1):
            spec = color_config.get(annotation_type.value)
            if not spec:
                continue
            fg_name, bg_name = (list(spec) + ["default"])[:2]
            fg = COLOR_NAMES.get(fg_name, -1)
            bg = COLOR_NAMES.get(bg_name, -1)
            try:
                curses.init_pair(pair_number, fg, bg)
            except curses.error as e:
                logging.warning(f"init_pair failed for '{annotation_type.value}': {e}")
                continue
            self.colors[annotation_type] = curses.color_pair(pair_number)

    def size(self) -> Size:
        height, width = self.stdscr.getmaxyx()
        return Size(height, width)

    def print_row(self, row: int, text: str) -> None:
        self._print_row(row, text, curses.A_NORMAL)

    def print_inverted_row(self, row: int, text: str) -> None:
        """Prints `text` in reverse video, padded to the full width."""
        width = self.size().width
        padding = max(width - display_width(text), 0)
        self._print_row(row, text + " " * padding, curses.A_REVERSE)

    def _print_row(self, row: int, text: str, attribute: int) -> None:
        try:
            self.stdscr.move(row, 0)
            self.stdscr.clrtoeol()
            if text:
                self.stdscr.addstr(row, 0, text, attribute)
        except curses.error as e:
            # writing the bottom-right cell moves the cursor off screen
            logging.debug(f"Curses error printing row {row}: {e}")

    def print_annotated_row(self, row: int, annotated_string: AnnotatedString) -> None:
        """Prints the segments of `annotated_string` with their colours."""
        try:
            self.stdscr.move(row, 0)
            self.stdscr.clrtoeol()
        except curses.error as e:
            logging.debug(f"Curses error clearing row {row}: {e}")
            return

        col = 0
        for segment in annotated_string:
            attribute = curses.A_NORMAL
            if segment.annotation_type is not None:
                attribute = self.colors.get(segment.annotation_type, curses.A_NORMAL)
            try:
                self.stdscr.addstr(row, col, segment.text, attribute)
            except curses.error as e:
                logging.debug(f"Curses error at ({row}, {col}): {e}")
                return
            col += display_width(segment.text)

    def move_caret_to(self, position: Position) -> None:
        try:
            self.stdscr.move(position.row, position.col)
        except curses.error as e:
            logging.warning(f"Curses error positioning caret at {position}: {e}")

    def hide_caret(self) -> None:
        self._set_caret_visibility(0)

    def show_caret(self) -> None:
        self._set_caret_visibility(1)

    def _set_caret_visibility(self, visibility: int) -> None:
        try:
            curses.curs_set(visibility)
        except curses.error:
            # not supported by every terminal
            pass

    def execute(self) -> None:
        """Flushes the frame to the physical screen."""
        try:
            self.stdscr.noutrefresh()
            curses.doupdate()
        except curses.error as e:
            logging.error(f"Curses doupdate error: {e}")
