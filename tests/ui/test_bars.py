# tests/ui/test_bars.py
"""Tests for the status, message and command bars."""

import pytest

from gred.core.Commands import Edit
from gred.core.geometry import Size
from gred.core.View import DocumentStatus
from gred.ui.bars import CommandBar, MessageBar, StatusBar


def sized(component, width: int):
    component.resize(Size(1, width))
    return component


# --- StatusBar ---

def test_status_bar_layout(renderer) -> None:
    bar = sized(StatusBar(), 40)
    bar.update_status(
        DocumentStatus(
            total_lines=3, current_line_idx=1, is_modified=True, file_name="a.py", file_type="Python"
        )
    )
    bar.render(renderer, 22)
    row = renderer.inverted_rows[22]
    assert len(row) == 40
    assert row.startswith("a.py - 3 lines (modified)")
    assert row.endswith("Python | 2/3")


def test_status_bar_too_narrow_prints_empty_row(renderer) -> None:
    bar = sized(StatusBar(), 10)
    bar.render(renderer, 0)
    assert renderer.inverted_rows[0] == ""


def test_status_bar_redraws_only_on_change(renderer) -> None:
    bar = sized(StatusBar(), 40)
    bar.render(renderer, 0)
    bar.update_status(DocumentStatus())
    assert not bar.needs_redraw()
    bar.update_status(DocumentStatus(total_lines=2))
    assert bar.needs_redraw()


# --- MessageBar ---

def test_message_bar_shows_fresh_message(renderer) -> None:
    bar = sized(MessageBar(duration=100.0), 40)
    bar.update_message("hello")
    bar.render(renderer, 5)
    assert renderer.rows[5] == "hello"
    assert not bar.needs_redraw()


def test_message_bar_clears_expired_message_once(renderer) -> None:
    bar = sized(MessageBar(duration=-1.0), 40)
    bar.update_message("gone")
    assert bar.is_expired()
    bar.render(renderer, 5)
    assert renderer.rows[5] == ""
    assert not bar.needs_redraw()


def test_message_bar_new_message_needs_redraw() -> None:
    bar = sized(MessageBar(duration=100.0), 40)
    bar.set_needs_redraw(False)
    bar.update_message("again")
    assert bar.needs_redraw()


# --- CommandBar ---

@pytest.fixture
def command_bar() -> CommandBar:
    bar = sized(CommandBar(), 20)
    bar.set_prompt("Find: ")
    return bar


def test_command_bar_edits_value(command_bar: CommandBar) -> None:
    for command in [Edit.insert("a"), Edit.insert("中"), Edit.insert("b"), Edit.delete_backward()]:
        command_bar.handle_edit_command(command)
    assert command_bar.value() == "a中"
    assert command_bar.caret_position_col() == 9


def test_command_bar_ignores_other_edits(command_bar: CommandBar) -> None:
    command_bar.handle_edit_command(Edit.insert("a"))
    command_bar.set_needs_redraw(False)
    command_bar.handle_edit_command(Edit.delete())
    command_bar.handle_edit_command(Edit.insert_newline())
    assert command_bar.value() == "a"
    assert not command_bar.needs_redraw()


def test_command_bar_draws_prompt_and_value(command_bar: CommandBar, renderer) -> None:
    command_bar.handle_edit_command(Edit.insert("x"))
    command_bar.render(renderer, 23)
    assert renderer.rows[23] == "Find: x"


def test_command_bar_keeps_end_of_long_value_visible(renderer) -> None:
    bar = sized(CommandBar(), 8)
    bar.set_prompt("Find: ")
    for ch in "abc":
        bar.handle_edit_command(Edit.insert(ch))
    bar.render(renderer, 0)
    assert renderer.rows[0] == "Find: bc"
    assert bar.caret_position_col() == 8


def test_command_bar_narrower_than_prompt(renderer) -> None:
    bar = sized(CommandBar(), 3)
    bar.set_prompt("Find: ")
    bar.render(renderer, 0)
    assert renderer.rows[0] == ""


def test_clear_value(command_bar: CommandBar) -> None:
    command_bar.handle_edit_command(Edit.insert("x"))
    command_bar.clear_value()
    assert command_bar.value() == ""
    assert command_bar.caret_position_col() == len("Find: ")
