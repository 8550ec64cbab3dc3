#!/usr/bin/env python3
# /gred/main.py
"""
gred Main Entry Point
=====================

This script launches the gred editor. It performs:
1) Environment Loading: reads ~/.config/gred/.env early (GRED_* switches).
2) Path Setup: makes the src/ layout importable for source runs.
3) Configuration & Logging: loads config and initializes logging.
4) Curses Wrapper: sets up and tears down curses without corrupting the terminal.
5) Application Run: enters the terminal session and runs the editor loop.
"""

from __future__ import annotations

import curses
import locale
import logging
import os
import signal
import sys
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv

# --- Step 1: Load Environment Variables from the User's Config Directory ---
load_dotenv(dotenv_path=Path.home() / ".config" / "gred" / ".env")

# --- Step 2: Set up the Python Path ---
src_root = os.path.join(os.path.dirname(os.path.abspath(__file__)), "src")
if src_root not in sys.path:
    sys.path.insert(0, src_root)

# --- Step 3: Immediate Logging and Configuration Setup ---
from gred.utils.logging_config import setup_logging  # noqa: E402
from gred.utils.utils import load_config  # noqa: E402

config: dict[str, Any] = load_config()
setup_logging(config)
logger = logging.getLogger("gred")

from gred.core.Editor import Editor  # noqa: E402
from gred.ui.KeyBinder import KeyBinder  # noqa: E402
from gred.ui.Terminal import Terminal  # noqa: E402
from gred.ui.TerminalAppMode import TerminalAppMode  # noqa: E402


# --- Step 4: Curses Application Runner ---
def main_app_runner(stdscr: curses.window, config: dict[str, Any], file_to_open: Optional[str]) -> None:
    """
    Target for `curses.wrapper`: builds the editor and runs it inside a
    terminal session that is restored however the loop ends.
    """
    # Ignore terminal suspension (Ctrl+Z), typical for full-screen TUIs.
    if hasattr(signal, "SIGTSTP"):
        signal.signal(signal.SIGTSTP, signal.SIG_IGN)

    with TerminalAppMode(stdscr):
        terminal = Terminal(stdscr, config)
        key_binder = KeyBinder(stdscr, config, size_provider=terminal.size)
        editor = Editor(terminal, key_binder, config)
        if file_to_open:
            editor.open_file(file_to_open)
        editor.run()


def start() -> None:
    """Initializes locale and runs the curses application via wrapper."""
    logger.info("gred editor starting up...")

    # Locale is important for proper character width/encoding behavior in curses.
    try:
        locale.setlocale(locale.LC_ALL, "")
    except locale.Error:
        logger.warning("Could not set system locale. Character rendering may be affected.")

    file_to_open = sys.argv[1] if len(sys.argv) > 1 else None

    try:
        curses.wrapper(main_app_runner, config, file_to_open)
        logger.info("gred editor shut down gracefully.")
    except KeyboardInterrupt:
        logger.info("gred editor interrupted.")
    except Exception:
        logger.critical("Unhandled exception at the top level.", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    start()
