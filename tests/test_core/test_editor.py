# tests/test_core/test_editor.py
"""Tests for the top-level `Editor`: prompts, quitting, saving and the loop.

The editor is driven through `StubRenderer` and `StubKeyBinder`, so no
terminal is needed.
"""

from pathlib import Path

import pytest

from gred.core.Buffer import Buffer
from gred.core.Commands import Edit, Move, System, SystemKind
from gred.core.Editor import (
    HELP_MESSAGE,
    QUIT_TIMES,
    SAVE_PROMPT,
    SEARCH_PROMPT,
    Editor,
    PromptType,
)
from gred.core.geometry import Location, Position, Size

from stubs import StubKeyBinder, StubRenderer

QUIT = System(SystemKind.QUIT)
SAVE = System(SystemKind.SAVE)
SEARCH = System(SystemKind.SEARCH)
DISMISS = System(SystemKind.DISMISS)


def typed(text: str) -> list[Edit]:
    return [Edit.insert(ch) for ch in text]


@pytest.fixture
def editor(renderer, mock_config) -> Editor:
    return Editor(renderer, StubKeyBinder(), mock_config)


def load_text(editor: Editor, text: str) -> None:
    editor.view.buffer = Buffer.from_text(text)


# --- construction and screen ---

def test_new_editor_sizes_components(editor: Editor) -> None:
    assert editor.view.size == Size(22, 80)
    assert editor.status_bar.size == Size(1, 80)
    assert editor.message_bar.current_message.text == HELP_MESSAGE


def test_refresh_screen_draws_every_component(editor: Editor, renderer) -> None:
    editor.refresh_screen()
    assert renderer.rows[23] == HELP_MESSAGE
    assert renderer.inverted_rows[22].startswith("[No Name] - 1 lines")
    assert renderer.inverted_rows[22].endswith("Text | 1/1")
    assert renderer.rows[0] == ""
    assert renderer.caret == Position(0, 0)
    assert renderer.caret_visible
    assert renderer.frames == 1


def test_refresh_screen_with_zero_size_draws_nothing(mock_config) -> None:
    renderer = StubRenderer(0, 0)
    editor = Editor(renderer, StubKeyBinder(), mock_config)
    editor.refresh_screen()
    assert renderer.frames == 0
    assert renderer.rows == {}


def test_resize_command_resizes_view(editor: Editor) -> None:
    editor.process_command(System.resize(Size(10, 40)))
    assert editor.terminal_size == Size(10, 40)
    assert editor.view.size == Size(8, 40)
    assert editor.command_bar.size == Size(1, 40)


def test_resize_is_handled_during_prompt(editor: Editor) -> None:
    editor.process_command(SEARCH)
    editor.process_command(System.resize(Size(5, 20)))
    assert editor.prompt_type is PromptType.SEARCH
    assert editor.view.size == Size(3, 20)


# --- editing and quitting ---

def test_edits_reach_the_view(editor: Editor) -> None:
    for command in typed("hi") + [Edit.insert_newline(), Move.UP, Move.END_OF_LINE]:
        editor.process_command(command)
    assert [line.raw_text() for line in editor.view.buffer.lines] == ["hi", ""]
    assert editor.view.text_location == Location(0, 2)


def test_quit_without_changes_is_immediate(editor: Editor) -> None:
    editor.process_command(QUIT)
    assert editor.should_quit


def test_quit_with_changes_needs_confirmation(editor: Editor) -> None:
    editor.process_command(Edit.insert("x"))
    for remaining in range(QUIT_TIMES - 1, 0, -1):
        editor.process_command(QUIT)
        assert not editor.should_quit
        assert editor.message_bar.current_message.text == (
            f"WARNING! File has unsaved changes. Press Ctrl-Q {remaining} more times to quit."
        )
    editor.process_command(QUIT)
    assert editor.should_quit


def test_other_command_resets_quit_confirmation(editor: Editor) -> None:
    editor.process_command(Edit.insert("x"))
    editor.process_command(QUIT)
    editor.process_command(Move.LEFT)
    assert editor.quit_times == 0
    assert editor.message_bar.current_message.text == ""
    editor.process_command(QUIT)
    assert not editor.should_quit


# --- search prompt ---

def test_search_prompt_moves_to_match_and_confirms(editor: Editor) -> None:
    load_text(editor, "fn main() {\n    42\n}")
    editor.process_command(SEARCH)
    assert editor.in_prompt()
    assert editor.command_bar.prompt == SEARCH_PROMPT
    for command in typed("42"):
        editor.process_command(command)
    assert editor.view.text_location == Location(1, 4)
    editor.process_command(Edit.insert_newline())
    assert not editor.in_prompt()
    assert editor.view.search_session is None
    assert editor.view.text_location == Location(1, 4)


def test_search_prompt_dismiss_restores_cursor(editor: Editor) -> None:
    load_text(editor, "abc\nneedle")
    editor.process_command(SEARCH)
    for command in typed("needle"):
        editor.process_command(command)
    assert editor.view.text_location == Location(1, 0)
    editor.process_command(DISMISS)
    assert not editor.in_prompt()
    assert editor.view.text_location == Location(0, 0)


def test_search_prompt_arrows_navigate_matches(editor: Editor) -> None:
    load_text(editor, "ab\nab\nab")
    editor.process_command(SEARCH)
    for command in typed("ab"):
        editor.process_command(command)
    assert editor.view.text_location == Location(0, 0)
    editor.process_command(Move.DOWN)
    assert editor.view.text_location == Location(1, 0)
    editor.process_command(Move.RIGHT)
    assert editor.view.text_location == Location(2, 0)
    editor.process_command(Move.LEFT)
    assert editor.view.text_location == Location(1, 0)
    editor.process_command(Move.UP)
    assert editor.view.text_location == Location(0, 0)


def test_search_prompt_backspace_edits_query(editor: Editor) -> None:
    load_text(editor, "abc")
    editor.process_command(SEARCH)
    for command in typed("ax") + [Edit.delete_backward()]:
        editor.process_command(command)
    assert editor.command_bar.value() == "a"


def test_caret_sits_in_command_bar_during_prompt(editor: Editor, renderer) -> None:
    editor.process_command(SEARCH)
    editor.process_command(Edit.insert("q"))
    editor.refresh_screen()
    assert renderer.caret == Position(23, len(SEARCH_PROMPT) + 1)
    assert renderer.rows[23] == f"{SEARCH_PROMPT}q"


# --- saving ---

def test_save_prompts_for_a_name_and_writes(editor: Editor, tmp_path: Path) -> None:
    target = tmp_path / "out.txt"
    editor.process_command(Edit.insert("x"))
    editor.process_command(SAVE)
    assert editor.prompt_type is PromptType.SAVE
    assert editor.command_bar.prompt == SAVE_PROMPT
    for command in typed(str(target)) + [Edit.insert_newline()]:
        editor.process_command(command)
    assert not editor.in_prompt()
    assert target.read_text(encoding="utf-8") == "x\n"
    assert editor.message_bar.current_message.text == "File saved successfully."
    assert not editor.view.get_status().is_modified


def test_save_prompt_can_be_aborted(editor: Editor) -> None:
    editor.process_command(SAVE)
    editor.process_command(DISMISS)
    assert not editor.in_prompt()
    assert editor.message_bar.current_message.text == "Save aborted."


def test_save_error_is_reported(editor: Editor, tmp_path: Path) -> None:
    editor.process_command(Edit.insert("x"))
    editor.process_command(SAVE)
    for command in typed(str(tmp_path / "missing" / "out.txt")) + [Edit.insert_newline()]:
        editor.process_command(command)
    assert editor.message_bar.current_message.text == "Error writing file!"
    assert editor.view.get_status().is_modified


def test_save_of_loaded_file_does_not_prompt(editor: Editor, tmp_path: Path) -> None:
    path = tmp_path / "doc.txt"
    path.write_text("old\n", encoding="utf-8")
    editor.open_file(str(path))
    editor.process_command(Edit.insert("n"))
    editor.process_command(SAVE)
    assert not editor.in_prompt()
    assert path.read_text(encoding="utf-8") == "nold\n"


def test_open_missing_file_reports_error(editor: Editor, tmp_path: Path) -> None:
    missing = str(tmp_path / "missing.txt")
    editor.open_file(missing)
    assert editor.message_bar.current_message.text == f"ERR: Could not open file: {missing}"
    assert not editor.view.is_file_loaded()


def test_open_file_updates_status(editor: Editor, tmp_path: Path) -> None:
    path = tmp_path / "two.txt"
    path.write_text("a\nb\n", encoding="utf-8")
    editor.open_file(str(path))
    assert editor.status_bar.current_status.file_name == "two.txt"
    assert editor.status_bar.current_status.total_lines == 2


# --- loop ---

def test_run_processes_commands_until_quit(renderer, mock_config) -> None:
    key_binder = StubKeyBinder(typed("ok") + [QUIT, QUIT, QUIT])
    editor = Editor(renderer, key_binder, mock_config)
    editor.run()
    assert editor.should_quit
    assert editor.view.buffer.lines[0].raw_text() == "ok"
    assert key_binder.commands == []
    assert renderer.rows[0] == "ok"


def test_run_ignores_undecodable_keys(renderer, mock_config) -> None:
    key_binder = StubKeyBinder([None, QUIT])
    editor = Editor(renderer, key_binder, mock_config)
    editor.run()
    assert editor.should_quit
