# src/gred/ui/bars.py
"""One-row bars drawn below the document view.

- ``StatusBar``: file name, line count, modified flag, file type and
  cursor line, drawn in reverse video.
- ``MessageBar``: short feedback messages that disappear after a while.
- ``CommandBar``: a prompt with an editable value, used for search and
  "Save as".
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Any

from gred.core.Commands import Edit, EditKind
from gred.core.Line import Line, display_width
from gred.core.UIComponent import UIComponent
from gred.core.View import DocumentStatus


DEFAULT_MESSAGE_DURATION = 5.0


## ==================== StatusBar ====================
class StatusBar(UIComponent):
    def __init__(self) -> None:
        super().__init__()
        self.current_status = DocumentStatus()

    def update_status(self, new_status: DocumentStatus) -> None:
        if new_status != self.current_status:
            self.current_status = new_status
            self.set_needs_redraw(True)

    def draw(self, renderer: Any, origin_row: int) -> None:
        status = self.current_status
        beginning = f"{status.file_name} - {status.line_count_to_string()}"
        modified = status.modified_indicator_to_string()
        if modified:
            beginning = f"{beginning} {modified}"
        back_part = f"{status.file_type} | {status.position_indicator_to_string()}"

        remainder_len = self.size.width - display_width(beginning)
        status_line = f"{beginning}{back_part:>{max(remainder_len, 0)}}"
        # too narrow: draw an empty bar rather than a cut-off one
        to_print = status_line if display_width(status_line) <= self.size.width else ""
        renderer.print_inverted_row(origin_row, to_print)


## ==================== MessageBar ====================
@dataclass
class Message:
    text: str = ""
    time: float = field(default_factory=time.monotonic)


class MessageBar(UIComponent):
    """Shows the latest message until it expires.

    Args:
        duration: Seconds a message stays visible.
    """

    def __init__(self, duration: float = DEFAULT_MESSAGE_DURATION) -> None:
        super().__init__()
        self.duration = duration
        self.current_message = Message()
        self.cleared_after_expiry = False

    def update_message(self, text: str) -> None:
        self.current_message = Message(text)
        self.cleared_after_expiry = False
        self.set_needs_redraw(True)
        if text:
            logging.debug(f"Message: {text}")

    def is_expired(self) -> bool:
        return time.monotonic() - self.current_message.time > self.duration

    def needs_redraw(self) -> bool:
        return (not self.cleared_after_expiry and self.is_expired()) or self._needs_redraw

    def draw(self, renderer: Any, origin_row: int) -> None:
        if self.is_expired():
            self.cleared_after_expiry = True
            renderer.print_row(origin_row, "")
        else:
            renderer.print_row(origin_row, self.current_message.text)


## ==================== CommandBar ====================
class CommandBar(UIComponent):
    def __init__(self) -> None:
        super().__init__()
        self.prompt = ""
        self._value = Line()

    def handle_edit_command(self, command: Edit) -> None:
        if command.kind is EditKind.INSERT and command.character is not None:
            self._value.append_char(command.character)
        elif command.kind is EditKind.DELETE_BACKWARD:
            self._value.delete_last()
        else:
            return
        self.set_needs_redraw(True)

    def caret_position_col(self) -> int:
        max_width = display_width(self.prompt) + self._value.width()
        return min(max_width, self.size.width)

    def value(self) -> str:
        return self._value.raw_text()

    def set_prompt(self, prompt: str) -> None:
        self.prompt = prompt
        self.set_needs_redraw(True)

    def clear_value(self) -> None:
        self._value = Line()
        self.set_needs_redraw(True)

    def draw(self, renderer: Any, origin_row: int) -> None:
        area_for_value = max(self.size.width - display_width(self.prompt), 0)
        value_end = self._value.width()
        # keep the end of the value visible while typing
        value_start = max(value_end - area_for_value, 0)
        visible = self._value.visible_substring(range(value_start, value_end))
        message = f"{self.prompt}{visible}"
        to_print = message if display_width(message) <= self.size.width else ""
        renderer.print_row(origin_row, to_print)
