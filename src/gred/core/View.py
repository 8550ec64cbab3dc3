# src/gred/core/View.py
"""gred.core.View
============================
Viewport controller for the document.

The view owns the cursor (``text_location``, in lines and graphemes), the
scroll offset (``scroll_offset``, in display cells) and the search session.
After every command the scroll offset is adjusted so the caret stays inside
the visible area, and ``draw`` turns the visible part of the document into
annotated rows for the renderer.

Search is a small state machine: the view is either idle
(``search_session is None``) or searching. Entering a search snapshots the
cursor and scroll offset; dismissing it restores them, confirming it keeps
the position of the last match.
"""

import logging
from dataclasses import dataclass
from enum import Enum, auto
from pathlib import Path
from typing import Optional, Protocol, Union

from .AnnotatedString import AnnotatedString
from .Buffer import Buffer
from .Commands import Edit, EditKind, Move
from .geometry import Location, Position, Size
from .Highlighter import Highlighter, LexicalClassifier, classifier_for
from .Line import Line
from .UIComponent import UIComponent


logger = logging.getLogger("gred")


class Renderer(Protocol):
    """What the view needs from a terminal."""

    def print_row(self, row: int, text: str) -> None: ...

    def print_annotated_row(self, row: int, annotated_string: AnnotatedString) -> None: ...


class SearchDirection(Enum):
    FORWARD = auto()
    BACKWARD = auto()


@dataclass
class SearchSession:
    """Snapshot taken when a search starts, plus the current query."""

    prev_location: Location
    prev_scroll_offset: Position
    query: Optional[Line] = None


@dataclass(frozen=True)
class DocumentStatus:
    total_lines: int = 0
    current_line_idx: int = 0
    is_modified: bool = False
    file_name: str = "[No Name]"
    file_type: str = "Text"

    def modified_indicator_to_string(self) -> str:
        return "(modified)" if self.is_modified else ""

    def line_count_to_string(self) -> str:
        return f"{self.total_lines} lines"

    def position_indicator_to_string(self) -> str:
        return f"{self.current_line_idx + 1}/{self.total_lines}"


## ==================== View ====================
class View(UIComponent):
    """Scrollable, searchable window onto a `Buffer`.

    Args:
        buffer: Document to show; an empty one by default.
        app_name: Name shown in the welcome message.
        app_version: Version shown in the welcome message.
    """

    def __init__(
        self,
        buffer: Optional[Buffer] = None,
        app_name: str = "gred",
        app_version: str = "",
    ) -> None:
        super().__init__()
        self.buffer = buffer or Buffer()
        self.app_name = app_name
        self.app_version = app_version
        self.text_location = Location()
        self.scroll_offset = Position()
        self.search_session: Optional[SearchSession] = None
        self.classifier: LexicalClassifier = classifier_for(self.buffer.file_info.name())

    # --- file i/o ---

    def load(self, path: Union[str, Path]) -> None:
        """Replaces the document with the contents of `path`.

        Raises:
            OSError: The file could not be read; the view is unchanged.
        """
        self.buffer = Buffer.load(path)
        self.classifier = classifier_for(self.buffer.file_info.name())
        self.text_location = Location()
        self.scroll_offset = Position()
        self.set_needs_redraw()

    def save(self) -> None:
        self.buffer.save()
        self.set_needs_redraw()

    def save_as(self, path: Union[str, Path]) -> None:
        self.buffer.save_as(path)
        self.classifier = classifier_for(self.buffer.file_info.name())
        self.set_needs_redraw()

    def is_file_loaded(self) -> bool:
        return self.buffer.is_file_loaded()

    def get_status(self) -> DocumentStatus:
        file_info = self.buffer.file_info
        return DocumentStatus(
            total_lines=self.buffer.height(),
            current_line_idx=self.text_location.line_idx,
            is_modified=self.buffer.dirty,
            file_name=str(file_info),
            file_type=file_info.file_type,
        )

    # --- search ---

    def enter_search(self) -> None:
        self.search_session = SearchSession(self.text_location, self.scroll_offset)

    def exit_search(self) -> None:
        """Ends the search and keeps the cursor on the last match."""
        self.search_session = None
        self.set_needs_redraw()

    def dismiss_search(self) -> None:
        """Ends the search and returns to where it started."""
        if self.search_session is not None:
            self.text_location = self.search_session.prev_location
            self.scroll_offset = self.search_session.prev_scroll_offset
            self.scroll_into_view()
        self.search_session = None
        self.set_needs_redraw()

    def update_query(self, query: str) -> None:
        """Replaces the query of the running search without searching."""
        assert self.search_session is not None, "MalformedSearchState: no search in progress"
        if self.search_session is None:
            return
        self.search_session.query = Line(query)

    def search(self, query: str) -> None:
        """Sets the query and moves to the first match at or after the cursor."""
        self.update_query(query)
        self.search_in_direction(self.text_location, SearchDirection.FORWARD)

    def _get_search_query(self) -> Optional[Line]:
        assert self.search_session is not None, "MalformedSearchState: no search in progress"
        if self.search_session is None:
            return None
        return self.search_session.query

    def search_in_direction(self, from_location: Location, direction: SearchDirection) -> None:
        query = self._get_search_query()
        if query is None or query.is_empty():
            return
        if direction is SearchDirection.FORWARD:
            location = self.buffer.search_forward(query.raw_text(), from_location)
        else:
            location = self.buffer.search_backward(query.raw_text(), from_location)
        if location is not None:
            self.text_location = location
            self.center_on_cursor()
            logger.debug(f"Search '{query}' matched at {location}")
        else:
            logger.debug(f"Search '{query}' found no match")
        self.set_needs_redraw()

    def search_next(self) -> None:
        """Moves to the next match after the one under the cursor."""
        query = self._get_search_query()
        if query is None or query.is_empty():
            return
        step = max(query.grapheme_count(), 1)
        location = Location(
            self.text_location.line_idx, self.text_location.grapheme_idx + step
        )
        self.search_in_direction(location, SearchDirection.FORWARD)

    def search_prev(self) -> None:
        self.search_in_direction(self.text_location, SearchDirection.BACKWARD)

    # --- command handling ---

    def handle_edit_command(self, command: Edit) -> None:
        if command.kind is EditKind.INSERT and command.character is not None:
            self.insert_char(command.character)
        elif command.kind is EditKind.INSERT_NEWLINE:
            self.insert_newline()
        elif command.kind is EditKind.DELETE:
            self.delete()
        elif command.kind is EditKind.DELETE_BACKWARD:
            self.delete_backward()

    def handle_move_command(self, command: Move) -> None:
        height = self.size.height
        if command is Move.UP:
            self.move_up(1)
        elif command is Move.DOWN:
            self.move_down(1)
        elif command is Move.LEFT:
            self.move_left()
        elif command is Move.RIGHT:
            self.move_right()
        elif command is Move.PAGE_UP:
            self.move_up(max(height - 1, 0))
        elif command is Move.PAGE_DOWN:
            self.move_down(max(height - 1, 0))
        elif command is Move.START_OF_LINE:
            self.move_to_start_of_line()
        elif command is Move.END_OF_LINE:
            self.move_to_end_of_line()
        self.scroll_into_view()

    def insert_char(self, character: str) -> None:
        old_len = self.buffer.grapheme_count(self.text_location.line_idx)
        self.buffer.insert_char(character, self.text_location)
        new_len = self.buffer.grapheme_count(self.text_location.line_idx)
        # a combining mark merges into the previous grapheme
        if new_len > old_len:
            self.handle_move_command(Move.RIGHT)
        self.set_needs_redraw()

    def insert_newline(self) -> None:
        self.buffer.insert_newline(self.text_location)
        self.handle_move_command(Move.RIGHT)
        self.set_needs_redraw()

    def delete(self) -> None:
        self.buffer.delete(self.text_location)
        self.set_needs_redraw()

    def delete_backward(self) -> None:
        if self.text_location == Location(0, 0):
            return
        self.handle_move_command(Move.LEFT)
        self.delete()

    # --- cursor movement ---

    def move_up(self, step: int) -> None:
        self.text_location = Location(
            max(self.text_location.line_idx - step, 0), self.text_location.grapheme_idx
        )
        self.snap_to_valid_grapheme()

    def move_down(self, step: int) -> None:
        self.text_location = Location(
            self.text_location.line_idx + step, self.text_location.grapheme_idx
        )
        self.snap_to_valid_line()
        self.snap_to_valid_grapheme()

    def move_left(self) -> None:
        if self.text_location.grapheme_idx > 0:
            self.text_location = Location(
                self.text_location.line_idx, self.text_location.grapheme_idx - 1
            )
        elif self.text_location.line_idx > 0:
            self.move_up(1)
            self.move_to_end_of_line()

    def move_right(self) -> None:
        line_idx, grapheme_idx = self.text_location.line_idx, self.text_location.grapheme_idx
        if grapheme_idx < self.buffer.grapheme_count(line_idx):
            self.text_location = Location(line_idx, grapheme_idx + 1)
        elif line_idx + 1 < self.buffer.height():
            self.move_to_start_of_line()
            self.move_down(1)

    def move_to_start_of_line(self) -> None:
        self.text_location = Location(self.text_location.line_idx, 0)

    def move_to_end_of_line(self) -> None:
        line_idx = self.text_location.line_idx
        self.text_location = Location(line_idx, self.buffer.grapheme_count(line_idx))

    def snap_to_valid_grapheme(self) -> None:
        line_idx = self.text_location.line_idx
        grapheme_idx = min(self.text_location.grapheme_idx, self.buffer.grapheme_count(line_idx))
        self.text_location = Location(line_idx, grapheme_idx)

    def snap_to_valid_line(self) -> None:
        line_idx = min(self.text_location.line_idx, self.buffer.height() - 1)
        self.text_location = Location(line_idx, self.text_location.grapheme_idx)

    # --- scrolling ---

    def set_size(self, size: Size) -> None:
        self.size = size
        self.scroll_into_view()

    def scroll_vertically(self, to: int) -> None:
        height = self.size.height
        row = self.scroll_offset.row
        if to < row:
            row = to
        elif to >= row + height:
            row = max(to - height + 1, 0)
        else:
            return
        self.scroll_offset = Position(row, self.scroll_offset.col)
        logger.debug(f"Scrolled vertically to row {row}")
        self.set_needs_redraw()

    def scroll_horizontally(self, to: int) -> None:
        width = self.size.width
        col = self.scroll_offset.col
        if to < col:
            col = to
        elif to >= col + width:
            col = max(to - width + 1, 0)
        else:
            return
        self.scroll_offset = Position(self.scroll_offset.row, col)
        logger.debug(f"Scrolled horizontally to column {col}")
        self.set_needs_redraw()

    def scroll_into_view(self) -> None:
        """Scrolls by the smallest amount that puts the caret on screen."""
        position = self.text_location_to_position()
        self.scroll_vertically(position.row)
        self.scroll_horizontally(position.col)

    def center_on_cursor(self) -> None:
        """Scrolls so the caret sits in the middle of the view where possible."""
        position = self.text_location_to_position()
        vertical_mid = (self.size.height + 1) // 2
        horizontal_mid = (self.size.width + 1) // 2
        self.scroll_offset = Position(
            max(position.row - vertical_mid, 0), max(position.col - horizontal_mid, 0)
        )
        self.set_needs_redraw()

    def text_location_to_position(self) -> Position:
        line_idx = self.text_location.line_idx
        col = self.buffer.width_until(line_idx, self.text_location.grapheme_idx)
        return Position(line_idx, col)

    def caret_position(self) -> Position:
        """Caret position relative to the top-left corner of the view."""
        return self.text_location_to_position().saturating_sub(self.scroll_offset)

    # --- drawing ---

    @staticmethod
    def build_welcome_message(width: int, name: str, version: str) -> str:
        if width == 0:
            return ""
        welcome_message = f"{name} editor -- version {version}"
        remaining_width = width - 1
        if remaining_width < len(welcome_message):
            return "~"
        return f"~{welcome_message:^{remaining_width}}"

    def draw(self, renderer: Renderer, origin_row: int) -> None:
        height, width = self.size.height, self.size.width
        if height == 0 or width == 0:
            return
        top_third = (height + 2) // 3
        scroll_top = self.scroll_offset.row
        left = self.scroll_offset.col

        query = None
        selected_match = None
        if self.search_session is not None and self.search_session.query is not None:
            query = self.search_session.query.raw_text() or None
            selected_match = self.text_location if query else None
        highlighter = Highlighter(query, selected_match, self.classifier)

        for row in range(height):
            line_idx = scroll_top + row
            if line_idx < self.buffer.height():
                line = self.buffer.lines[line_idx]
                highlighter.highlight(line_idx, line)
                renderer.print_annotated_row(
                    origin_row + row,
                    line.visible_substring(
                        range(left, left + width),
                        annotations=highlighter.get_annotations(line_idx),
                    ),
                )
            elif row == top_third and self.buffer.is_empty():
                renderer.print_row(
                    origin_row + row,
                    self.build_welcome_message(width, self.app_name, self.app_version),
                )
            else:
                renderer.print_row(origin_row + row, "~")
