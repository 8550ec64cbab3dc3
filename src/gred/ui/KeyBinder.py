# src/gred/ui/KeyBinder.py
"""KeyBinder.py
==================
Description:
-----------------------
The KeyBinder class translates terminal key presses into editor commands.
Bindings are configurable per action; printable characters become
insertions and a terminal resize becomes a resize command.

Main Methods:
1. get_key_input: Reads a single key or escape sequence from the terminal.
2. decode: Maps a key read by get_key_input to a `Command` (or None).
3. lookup: Finds the action bound to a key specification.
4. _decode_keystring: Turns "ctrl+q", "pageup", 27, ... into key codes.
"""

import curses
import logging
import re
from typing import Callable, Optional, Union

from gred.core.Commands import Command, Edit, Move, System, SystemKind
from gred.core.geometry import Size


KEY_LOGGER = logging.getLogger("gred.keyevents")

Key = Union[int, str]

ESC = 27

# Default bindings, overridable through config["keybindings"].
DEFAULT_KEYBINDINGS: dict[str, list[Key]] = {
    "quit": ["ctrl+q"],
    "save": ["ctrl+s"],
    "search": ["ctrl+f"],
    "dismiss": ["esc"],
    "insert_newline": ["enter", "ctrl+j", "ctrl+m"],
    "delete": ["delete"],
    "delete_backward": ["backspace", "ctrl+h", "ascii_del"],
    "move_up": ["up"],
    "move_down": ["down"],
    "move_left": ["left"],
    "move_right": ["right"],
    "page_up": ["pageup"],
    "page_down": ["pagedown"],
    "start_of_line": ["home"],
    "end_of_line": ["end"],
}

ACTION_COMMANDS: dict[str, Command] = {
    "quit": System(SystemKind.QUIT),
    "save": System(SystemKind.SAVE),
    "search": System(SystemKind.SEARCH),
    "dismiss": System(SystemKind.DISMISS),
    "insert_newline": Edit.insert_newline(),
    "delete": Edit.delete(),
    "delete_backward": Edit.delete_backward(),
    "move_up": Move.UP,
    "move_down": Move.DOWN,
    "move_left": Move.LEFT,
    "move_right": Move.RIGHT,
    "page_up": Move.PAGE_UP,
    "page_down": Move.PAGE_DOWN,
    "start_of_line": Move.START_OF_LINE,
    "end_of_line": Move.END_OF_LINE,
}

NAMED_KEYS: dict[str, int] = {
    "left": curses.KEY_LEFT,
    "right": curses.KEY_RIGHT,
    "up": curses.KEY_UP,
    "down": curses.KEY_DOWN,
    "home": curses.KEY_HOME,
    "end": curses.KEY_END,
    "pageup": curses.KEY_PPAGE,
    "pgup": curses.KEY_PPAGE,
    "pagedown": curses.KEY_NPAGE,
    "pgdn": curses.KEY_NPAGE,
    "delete": curses.KEY_DC,
    "del": curses.KEY_DC,
    "backspace": curses.KEY_BACKSPACE,
    "insert": curses.KEY_IC,
    "tab": 9,
    "enter": curses.KEY_ENTER,
    "return": curses.KEY_ENTER,
    "space": ord(" "),
    "esc": ESC,
    "ascii_del": 127,
    "escape": ESC,
}
NAMED_KEYS.update({f"f{i}": getattr(curses, f"KEY_F{i}", 264 + i) for i in range(1, 13)})


# ==================== KeyBinder Class ====================
class KeyBinder:
    """Decodes terminal input into editor commands.

    Args:
        stdscr: Window to read keys from.
        config: Merged configuration; ``config["keybindings"]`` maps action
            names to a key spec, a list of key specs or a ``"a|b"`` string.
        size_provider: Callable returning the terminal size, queried when
            the terminal reports a resize.
    """

    # Keys do NOT include the leading ESC, get_key_input() reads past it.
    ESCAPE_SEQUENCE_MAP: dict[str, str] = {
        "[A": "up", "[B": "down", "[C": "right", "[D": "left",
        "OA": "up", "OB": "down", "OC": "right", "OD": "left",
        "[H": "home", "[F": "end", "OH": "home", "OF": "end",
        "[1~": "home", "[4~": "end", "[7~": "home", "[8~": "end",
        "[2~": "insert", "[3~": "delete", "[5~": "pageup", "[6~": "pagedown",
    }

    def __init__(
        self,
        stdscr: Optional["curses.window"] = None,
        config: Optional[dict] = None,
        size_provider: Optional[Callable[[], Size]] = None,
    ) -> None:
        self.stdscr = stdscr
        self.config = config or {}
        self.size_provider = size_provider
        self.keybindings = self._load_keybindings()
        self.action_map = self._setup_action_map()

    def _load_keybindings(self) -> dict[str, list[Key]]:
        """Resolves the configured key specs of every action to key codes."""
        user_keybindings = self.config.get("keybindings", {})
        parsed: dict[str, list[Key]] = {}

        for action, default_spec in DEFAULT_KEYBINDINGS.items():
            spec = user_keybindings.get(action, default_spec)
            if not spec:
                logging.debug("Keybinding for action %r is disabled or empty.", action)
                continue
            if isinstance(spec, list):
                specs = spec
            elif isinstance(spec, str) and "|" in spec:
                specs = [s.strip() for s in spec.split("|")]
            else:
                specs = [spec]

            codes: list[Key] = []
            for item in specs:
                try:
                    code = self._decode_keystring(item)
                except ValueError as e:
                    logging.error(
                        "Error parsing keybinding %r for action %r: %s. It will be ignored.",
                        item, action, e,
                    )
                    continue
                if code not in codes:
                    codes.append(code)
            if codes:
                parsed[action] = codes
            else:
                logging.warning("No valid key codes for action %r. It will not be bound.", action)

        logging.debug("Loaded keybindings (action -> key codes): %s", parsed)
        return parsed

    def _setup_action_map(self) -> dict[Key, Command]:
        action_map: dict[Key, Command] = {}
        for action, codes in self.keybindings.items():
            for code in codes:
                if code in action_map:
                    logging.warning("Key %r is bound twice; keeping the first binding.", code)
                    continue
                action_map[code] = ACTION_COMMANDS[action]
        return action_map

    def _decode_keystring(self, key_input: Key) -> Key:
        """Decodes a key specification into a key code.

        Args:
            key_input: An integer key code, a named key ("pageup", "esc"),
                a single character, or a combination such as "ctrl+q".

        Returns:
            The integer key code.

        Raises:
            ValueError: The key spec is empty or uses an unknown key
                or modifier.
        """
        if isinstance(key_input, int):
            return key_input
        if not isinstance(key_input, str):
            raise ValueError(f"Invalid key spec type: {type(key_input)}. Expected str or int.")

        s = key_input.strip().lower()
        if not s:
            raise ValueError("Key string cannot be empty.")
        if s in NAMED_KEYS:
            return NAMED_KEYS[s]

        parts = s.split("+")
        base_key = parts[-1].strip()
        modifiers = {p.strip() for p in parts[:-1]}

        if base_key in NAMED_KEYS:
            base_code = NAMED_KEYS[base_key]
        elif len(base_key) == 1:
            base_code = ord(base_key)
        else:
            raise ValueError(f"Unknown base key '{base_key}' in '{key_input}'")

        if "ctrl" in modifiers:
            modifiers.remove("ctrl")
            if "a" <= base_key <= "z" and len(base_key) == 1:
                base_code = ord(base_key) - ord("a") + 1
            elif base_key == "[":
                base_code = ESC
            elif base_key == "\\":
                base_code = 28
            elif base_key == "]":
                base_code = 29

        if modifiers:
            raise ValueError(f"Unknown or unhandled modifiers {sorted(modifiers)} in '{key_input}'")
        return base_code

    def lookup(self, key_spec: Key) -> Optional[str]:
        """Finds the action name bound to `key_spec`, or None."""
        try:
            decoded_key = self._decode_keystring(key_spec)
        except ValueError:
            return None
        for action_name, key_list in self.keybindings.items():
            if decoded_key in key_list:
                return action_name
        return None

    def decode(self, key: Key) -> Optional[Command]:
        """Maps a key from `get_key_input` to a command.

        Returns:
            The bound command, an insertion for a printable character,
            a resize command for ``KEY_RESIZE``, or None for anything else.
        """
        KEY_LOGGER.debug("decode: key=%r (%s)", key, type(key).__name__)

        if key == curses.KEY_RESIZE:
            if self.size_provider is None:
                return None
            return System.resize(self.size_provider())

        if key in self.action_map:
            return self.action_map[key]

        if isinstance(key, str) and len(key) == 1 and key.isprintable():
            return Edit.insert(key)
        if key == 9:
            return Edit.insert("\t")

        logging.debug("decode: no command for key %r", key)
        return None

    def get_key_input(self, window: Optional["curses.window"] = None) -> Key:
        """Reads a single key or escape sequence from the terminal.

        Returns:
            - an ``int`` for curses key codes and control characters,
            - a one-character ``str`` for text input,
            - ``ESC`` for a lone escape or an unknown sequence,
            - ``curses.ERR`` when reading failed.
        """
        target = window or self.stdscr
        try:
            ch = target.get_wch()
            ch = self._normalize(ch)
            if ch != ESC:
                return ch

            seq = ""
            target.nodelay(True)
            try:
                while True:
                    try:
                        nx = target.get_wch()
                    except curses.error:
                        break
                    seq += nx if isinstance(nx, str) else f"<{nx}>"
            finally:
                target.nodelay(False)

            if not seq:
                return ESC
            if seq[0] == "\x1b":
                seq = seq[1:]

            mapped = self.ESCAPE_SEQUENCE_MAP.get(seq)
            if not mapped:
                cleaned = "".join(re.findall(r"[\[O0-9;~A-Za-z]", seq))
                mapped = self.ESCAPE_SEQUENCE_MAP.get(cleaned)
            if mapped:
                code = NAMED_KEYS[mapped]
                KEY_LOGGER.debug("get_key_input: ESC %r -> %r -> %r", seq, mapped, code)
                return code

            logging.warning("get_key_input: unknown escape sequence: ESC + %r", seq)
            return ESC
        except curses.error:
            return curses.ERR

    @staticmethod
    def _normalize(ch: Key) -> Key:
        """Turns control characters delivered as str into their int codes."""
        if isinstance(ch, str) and len(ch) == 1 and (ord(ch) < 32 or ord(ch) == 127):
            return ord(ch)
        return ch
