# src/gred/core/Editor.py
"""gred.core.Editor
============================
Top-level controller of the gred editor.

The editor wires the document view to the terminal and the key decoder,
and adds the behaviour that sits above a single view:

- the prompts (search and "Save as") shown in the command bar,
- the quit confirmation for documents with unsaved changes,
- the status and message bars,
- the read-command-redraw loop in ``run``.

It does not touch curses directly. The renderer and the key source are
passed in, so the whole loop can be driven by test doubles.
"""

import logging
from enum import Enum, auto
from typing import Any, Optional

from gred import NAME, __version__
from gred.ui import bars

from .Commands import Command, Edit, EditKind, Move, System, SystemKind
from .geometry import Position, Size
from .View import View


QUIT_TIMES = 3
HELP_MESSAGE = "HELP: Ctrl-F = find | Ctrl-S = save | Ctrl-Q = quit"
SEARCH_PROMPT = "Search (Esc to cancel, Arrows to navigate): "
SAVE_PROMPT = "Save as: "


class PromptType(Enum):
    NONE = auto()
    SEARCH = auto()
    SAVE = auto()


## ==================== Editor ====================
class Editor:
    """Runs the editor on a renderer and a key source.

    Args:
        terminal: Renderer with ``size``, ``print_row``,
            ``print_annotated_row``, ``print_inverted_row``,
            ``move_caret_to``, ``hide_caret``, ``show_caret`` and
            ``execute``.
        key_binder: Key source with ``get_key_input`` and ``decode``.
        config: Merged configuration dictionary.
    """

    def __init__(self, terminal: Any, key_binder: Any, config: Optional[dict] = None) -> None:
        self.terminal = terminal
        self.key_binder = key_binder
        self.config = config or {}
        editor_config = self.config.get("editor", {})

        self.should_quit = False
        self.quit_times = 0
        self.prompt_type = PromptType.NONE
        self.terminal_size = Size()

        self.view = View(app_name=NAME, app_version=__version__)
        self.status_bar = bars.StatusBar()
        self.message_bar = bars.MessageBar(
            editor_config.get("message_duration", bars.DEFAULT_MESSAGE_DURATION)
        )
        self.command_bar = bars.CommandBar()

        self.handle_resize_command(self.terminal.size())
        self.update_message(HELP_MESSAGE)
        self.refresh_status()

    # --- lifecycle ---

    def open_file(self, file_name: str) -> None:
        try:
            self.view.load(file_name)
        except OSError as e:
            logging.error(f"Could not open '{file_name}': {e}")
            self.update_message(f"ERR: Could not open file: {file_name}")
        self.refresh_status()

    def run(self) -> None:
        """Reads, processes and redraws until a quit is confirmed."""
        logging.info("Editor loop started")
        while True:
            self.refresh_screen()
            if self.should_quit:
                break
            key = self.key_binder.get_key_input()
            command = self.key_binder.decode(key)
            if command is not None:
                self.process_command(command)
            self.refresh_status()
        logging.info("Editor loop finished")

    def refresh_status(self) -> None:
        self.status_bar.update_status(self.view.get_status())

    def update_message(self, new_message: str) -> None:
        self.message_bar.update_message(new_message)

    # --- command dispatch ---

    def process_command(self, command: Command) -> None:
        if isinstance(command, System) and command.kind is SystemKind.RESIZE:
            if command.size is not None:
                self.handle_resize_command(command.size)
            return
        if self.prompt_type is PromptType.SEARCH:
            self.process_command_during_search(command)
        elif self.prompt_type is PromptType.SAVE:
            self.process_command_during_save(command)
        else:
            self.process_command_no_prompt(command)

    def process_command_no_prompt(self, command: Command) -> None:
        if isinstance(command, System) and command.kind is SystemKind.QUIT:
            self.handle_quit_command()
            return
        self.reset_quit_times()

        if isinstance(command, System):
            if command.kind is SystemKind.SEARCH:
                self.set_prompt(PromptType.SEARCH)
            elif command.kind is SystemKind.SAVE:
                self.handle_save_command()
        elif isinstance(command, Edit):
            self.view.handle_edit_command(command)
        elif isinstance(command, Move):
            self.view.handle_move_command(command)

    def process_command_during_save(self, command: Command) -> None:
        if isinstance(command, System):
            if command.kind is SystemKind.DISMISS:
                self.set_prompt(PromptType.NONE)
                self.update_message("Save aborted.")
        elif isinstance(command, Edit):
            if command.kind is EditKind.INSERT_NEWLINE:
                file_name = self.command_bar.value()
                self.save(file_name)
                self.set_prompt(PromptType.NONE)
            else:
                self.command_bar.handle_edit_command(command)

    def process_command_during_search(self, command: Command) -> None:
        if isinstance(command, System):
            if command.kind is SystemKind.DISMISS:
                self.set_prompt(PromptType.NONE)
                self.view.dismiss_search()
        elif isinstance(command, Edit):
            if command.kind is EditKind.INSERT_NEWLINE:
                self.set_prompt(PromptType.NONE)
                self.view.exit_search()
            else:
                self.command_bar.handle_edit_command(command)
                self.view.search(self.command_bar.value())
        elif command in (Move.RIGHT, Move.DOWN):
            self.view.search_next()
        elif command in (Move.LEFT, Move.UP):
            self.view.search_prev()

    # --- quitting ---

    def handle_quit_command(self) -> None:
        if not self.view.get_status().is_modified or self.quit_times + 1 == QUIT_TIMES:
            self.should_quit = True
        else:
            remaining = QUIT_TIMES - self.quit_times - 1
            self.update_message(
                f"WARNING! File has unsaved changes. Press Ctrl-Q {remaining} more times to quit."
            )
            self.quit_times += 1

    def reset_quit_times(self) -> None:
        if self.quit_times > 0:
            self.quit_times = 0
            self.update_message("")

    # --- saving ---

    def handle_save_command(self) -> None:
        if self.view.is_file_loaded():
            self.save(None)
        else:
            self.set_prompt(PromptType.SAVE)

    def save(self, file_name: Optional[str]) -> None:
        try:
            if file_name:
                self.view.save_as(file_name)
            else:
                self.view.save()
        except OSError as e:
            logging.error(f"Saving failed: {e}")
            self.update_message("Error writing file!")
        else:
            self.update_message("File saved successfully.")

    # --- prompts ---

    def in_prompt(self) -> bool:
        return self.prompt_type is not PromptType.NONE

    def set_prompt(self, prompt_type: PromptType) -> None:
        if prompt_type is PromptType.SAVE:
            self.command_bar.set_prompt(SAVE_PROMPT)
        elif prompt_type is PromptType.SEARCH:
            self.view.enter_search()
            self.command_bar.set_prompt(SEARCH_PROMPT)
        else:
            self.message_bar.set_needs_redraw(True)
        self.command_bar.clear_value()
        self.prompt_type = prompt_type

    # --- screen ---

    def handle_resize_command(self, size: Size) -> None:
        self.terminal_size = size
        self.view.resize(Size(max(size.height - 2, 0), size.width))
        bar_size = Size(1, size.width)
        self.message_bar.resize(bar_size)
        self.status_bar.resize(bar_size)
        self.command_bar.resize(bar_size)

    def refresh_screen(self) -> None:
        height, width = self.terminal_size.height, self.terminal_size.width
        if height == 0 or width == 0:
            return
        bottom_bar_row = height - 1
        self.terminal.hide_caret()
        if self.in_prompt():
            self.command_bar.render(self.terminal, bottom_bar_row)
        else:
            self.message_bar.render(self.terminal, bottom_bar_row)
        if height > 1:
            self.status_bar.render(self.terminal, height - 2)
        if height > 2:
            self.view.render(self.terminal, 0)

        if self.in_prompt():
            new_caret_pos = Position(bottom_bar_row, self.command_bar.caret_position_col())
        else:
            new_caret_pos = self.view.caret_position()
        self.terminal.move_caret_to(new_caret_pos)
        self.terminal.show_caret()
        self.terminal.execute()
