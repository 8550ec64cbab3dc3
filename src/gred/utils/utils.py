# src/gred/utils/utils.py
"""
gred.utils.utils
===================

Configuration helpers for the gred editor.

- Automatic user configuration: creates ``config.toml`` and ``.env`` in
  ``~/.config/gred`` on first run.
- Layered loading: the embedded ``DEFAULT_CONFIG`` is always the base,
  and the user's ``config.toml`` is deep-merged over it.

A missing or broken user file never stops the editor from starting; the
defaults are used instead.
"""

import logging
from pathlib import Path
from typing import Any, Dict, Optional

import toml

logger = logging.getLogger("gred")

ENV_TEMPLATE = """# Environment switches for gred
# Set to 1 to write every key press to keytrace.log
GRED_KEYTRACE=
"""

# The complete built-in configuration. User settings are merged over it.
DEFAULT_CONFIG: Dict[str, Any] = {
    "editor": {
        "message_duration": 5.0,
    },
    "keybindings": {
        "quit": "ctrl+q",
        "save": "ctrl+s",
        "search": "ctrl+f",
        "dismiss": "esc",
        "delete": "del",
        "delete_backward": ["backspace", "ctrl+h", "ascii_del"],
        "insert_newline": ["enter", "ctrl+j", "ctrl+m"],
        "move_up": ["up"],
        "move_down": ["down"],
        "move_left": ["left"],
        "move_right": ["right"],
        "page_up": ["pageup"],
        "page_down": ["pagedown"],
        "start_of_line": ["home"],
        "end_of_line": ["end"],
    },
    "colors": {
        "match": ["black", "white"],
        "selected_match": ["black", "yellow"],
        "number": ["red", "default"],
        "keyword": ["blue", "default"],
        "type": ["green", "default"],
        "known_value": ["magenta", "default"],
        "char": ["yellow", "default"],
        "string": ["yellow", "default"],
        "comment": ["cyan", "default"],
    },
    "logging": {
        "file_level": "DEBUG",
        "console_level": "WARNING",
        "log_to_console": False,
        "separate_error_log": False,
        "log_dir": "",
    },
}


# --- Helper Functions ---

def get_config_dir() -> Path:
    return Path.home() / ".config" / "gred"


def ensure_user_config_exists(config_dir: Optional[Path] = None) -> None:
    """Creates ``config.toml`` and ``.env`` in `config_dir` if missing."""
    config_dir = config_dir or get_config_dir()
    user_config_path = config_dir / "config.toml"
    user_env_path = config_dir / ".env"
    try:
        config_dir.mkdir(parents=True, exist_ok=True)

        if not user_config_path.exists():
            user_config_path.write_text(toml.dumps(DEFAULT_CONFIG), encoding="utf-8")
            logger.info(f"Created user config template at: {user_config_path}")

        if not user_env_path.exists():
            user_env_path.write_text(ENV_TEMPLATE, encoding="utf-8")
            logger.info(f"Created user .env template at: {user_env_path}")

    except OSError as e:
        logger.critical(f"Could not create user configuration files: {e}", exc_info=True)


def load_config(config_dir: Optional[Path] = None) -> Dict[str, Any]:
    """Loads the defaults and merges the user's ``config.toml`` over them."""
    config_dir = config_dir or get_config_dir()
    final_config = deep_merge({}, DEFAULT_CONFIG)
    logger.debug("Loaded embedded default configuration.")

    ensure_user_config_exists(config_dir)

    user_config_path = config_dir / "config.toml"
    if user_config_path.is_file():
        try:
            user_config = toml.load(user_config_path)
            final_config = deep_merge(final_config, user_config)
            logger.info(f"Successfully loaded and merged user config from {user_config_path}")
        except (OSError, toml.TomlDecodeError) as e:
            logger.error(f"Could not parse user config '{user_config_path}': {e}. Using defaults.")

    return final_config


def deep_merge(base: Dict, override: Dict) -> Dict:
    """
    Recursively merges the `override` dictionary into the `base` dictionary.
    """
    result = base.copy()
    for key, value in override.items():
        if isinstance(result.get(key), dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value
    return result
