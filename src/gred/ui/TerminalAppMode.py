# src/gred/ui/TerminalAppMode.py
from __future__ import annotations

import curses
import logging
import signal
from types import FrameType
from typing import Any, Optional

from curses import putp, setupterm, tigetstr


class TerminalAppMode:
    """
    Scoped terminal session for the editor:

    - Alternate screen buffer (smcup/rmcup) so the shell prompt is hidden.
    - Application cursor keys (smkx/rmkx).
    - raw + noecho, keypad(True), short ESC delay.

    Use it as a context manager. Cooked mode is restored when the block
    ends normally, when an exception escapes it, and on SIGTERM (turned
    into ``SystemExit`` while the session is active).
    """

    def __init__(self, stdscr: Optional[curses.window] = None) -> None:
        self._entered: bool = False
        self._stdscr: Optional[curses.window] = stdscr
        self._previous_sigterm: Any = None

    def __enter__(self) -> "TerminalAppMode":
        if self._stdscr is None:
            raise RuntimeError("TerminalAppMode needs a curses window to enter")
        self.enter(self._stdscr)
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.exit()

    def enter(self, stdscr: curses.window) -> None:
        self._stdscr = stdscr

        try:
            setupterm()
        except curses.error as e:
            logging.debug("setupterm() failed or not required: %r", e)

        self._tputs("smcup")
        self._tputs("smkx")

        try:
            curses.raw()
        except curses.error:
            curses.cbreak()
        curses.noecho()
        stdscr.keypad(True)

        try:
            curses.set_escdelay(35)
        except curses.error:
            pass

        stdscr.scrollok(False)
        stdscr.leaveok(False)
        stdscr.clearok(True)
        stdscr.erase()
        stdscr.refresh()

        self._install_sigterm_handler()
        self._entered = True
        logging.debug("TerminalAppMode: entered (alternate screen + app cursor keys).")

    def exit(self) -> None:
        if not self._entered:
            return

        try:
            if self._stdscr is not None:
                self._stdscr.keypad(False)
        except curses.error:
            pass

        try:
            curses.noraw()
        except curses.error:
            try:
                curses.nocbreak()
            except curses.error:
                pass
        try:
            curses.echo()
        except curses.error:
            pass

        self._tputs("rmkx")
        self._tputs("rmcup")
        self._restore_sigterm_handler()

        self._entered = False
        logging.debug("TerminalAppMode: exited (restored terminal modes).")

    # ── helpers ───────────────────────────────────────────────────────────────

    def _install_sigterm_handler(self) -> None:
        def _on_sigterm(signum: int, frame: Optional[FrameType]) -> None:
            raise SystemExit(128 + signum)

        try:
            self._previous_sigterm = signal.signal(signal.SIGTERM, _on_sigterm)
        except ValueError:
            # signal handlers can only be set from the main thread
            self._previous_sigterm = None

    def _restore_sigterm_handler(self) -> None:
        if self._previous_sigterm is None:
            return
        try:
            signal.signal(signal.SIGTERM, self._previous_sigterm)
        except ValueError:
            pass
        self._previous_sigterm = None

    def _tputs(self, capname: str) -> None:
        try:
            s = tigetstr(capname)
            if s:
                putp(s)
        except curses.error as e:
            # Missing capability (FreeBSD console, etc.).
            logging.debug("tputs(%s) skipped: %r", capname, e)
