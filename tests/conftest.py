# tests/conftest.py
"""Pytest configuration with shared fixtures for the gred editor tests."""

from __future__ import annotations

from typing import Any, Callable
from unittest.mock import MagicMock

import pytest

from gred.core.Buffer import Buffer
from gred.core.geometry import Size
from gred.core.Line import Line
from gred.core.View import View
from gred.utils.utils import DEFAULT_CONFIG, deep_merge

from stubs import StubRenderer


@pytest.fixture
def mock_stdscr() -> MagicMock:
    """A mocked curses window reporting a 24x80 terminal."""
    stdscr = MagicMock()
    stdscr.getmaxyx.return_value = (24, 80)
    return stdscr


@pytest.fixture
def mock_config() -> dict[str, Any]:
    """A private copy of the built-in configuration."""
    return deep_merge({}, DEFAULT_CONFIG)


@pytest.fixture
def renderer() -> StubRenderer:
    return StubRenderer()


@pytest.fixture
def make_view() -> Callable[..., View]:
    """Builds a view over the given lines with the given viewport size."""

    def _make(lines: list[str], height: int = 10, width: int = 80) -> View:
        view = View(Buffer([Line(s) for s in lines]), app_name="gred", app_version="0.1.0")
        view.resize(Size(height, width))
        return view

    return _make
