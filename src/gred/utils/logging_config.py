# src/gred/utils/logging_config.py
"""gred.utils.logging_config
===========================

Logging configuration for the gred editor.

Features:
    - Rotating file logging for general application events (editor.log).
    - Optional console logging to stderr with configurable log level.
    - Optional separate error log file (error.log) for ERROR and CRITICAL events.
    - Optional key event tracing (keytrace.log) enabled via the GRED_KEYTRACE
      environment variable.
    - Log files go to ``logging.log_dir`` (default: the working directory);
      when that directory cannot be created, the system temp directory is used.
    - Safe reconfiguration: clears existing handlers so repeated calls do not
      duplicate records.
    - Never raises; problems are reported to stderr.

Globals:
    logger: Main application logger ("gred").
    KEY_LOGGER: Logger for raw key-press trace events ("gred.keyevents").
"""

import logging
import logging.handlers
import os
import sys
import tempfile
from typing import Any, Optional


# ======================== Global loggers ========================
# Unconfigured until ``setup_logging()`` attaches handlers.
logger = logging.getLogger("gred")
KEY_LOGGER = logging.getLogger("gred.keyevents")

KEYTRACE_ENV_VAR = "GRED_KEYTRACE"

FILE_FORMAT = "%(asctime)s - %(levelname)-8s - %(name)-15s - %(message)s (%(filename)s:%(lineno)d)"
CONSOLE_FORMAT = "%(levelname)-8s - %(name)-12s - %(message)s"


def _resolve_log_dir(log_dir: str) -> str:
    """Returns `log_dir`, created if needed, or the temp dir on failure."""
    if not log_dir:
        return ""
    try:
        os.makedirs(log_dir, exist_ok=True)
    except OSError as e_mkdir:
        print(f"Error creating log directory '{log_dir}': {e_mkdir}", file=sys.stderr)
        fallback = tempfile.gettempdir()
        print(f"Logging to temporary directory: '{fallback}'", file=sys.stderr)
        return fallback
    return log_dir


def _rotating_handler(
    filename: str, level: int, max_bytes: int, backup_count: int, formatter: logging.Formatter
) -> Optional[logging.Handler]:
    try:
        handler = logging.handlers.RotatingFileHandler(
            filename, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8"
        )
    except OSError as e:
        print(f"Error setting up log file '{filename}': {e}.", file=sys.stderr)
        return None
    handler.setFormatter(formatter)
    handler.setLevel(level)
    return handler


def keytrace_enabled() -> bool:
    return os.environ.get(KEYTRACE_ENV_VAR, "").lower() in {"1", "true", "yes"}


def setup_logging(config: Optional[dict[str, Any]] = None) -> None:
    """Configures application-wide logging handlers and log levels.

    Up to four independent handlers are set up:

    1. File handler: rotating editor.log from `file_level` (default DEBUG).
    2. Console handler: optional stderr output at `console_level`
       (default WARNING).
    3. Error-file handler: optional rotating error.log, ERROR and above.
    4. Key-event handler: rotating keytrace.log on the ``gred.keyevents``
       logger, only when ``GRED_KEYTRACE`` is ``1/true/yes``.

    Args:
        config: Application configuration. Only ``config["logging"]`` is
            read; recognised keys are ``file_level``, ``console_level``,
            ``log_to_console``, ``separate_error_log`` and ``log_dir``.
    """
    logging_config = (config or {}).get("logging", {})
    log_dir = _resolve_log_dir(logging_config.get("log_dir", ""))

    file_level = getattr(logging, str(logging_config.get("file_level", "DEBUG")).upper(), logging.DEBUG)
    file_formatter = logging.Formatter(FILE_FORMAT)
    log_filename = os.path.join(log_dir, "editor.log")
    file_handler = _rotating_handler(log_filename, file_level, 2 * 1024 * 1024, 5, file_formatter)

    console_handler = None
    if logging_config.get("log_to_console", True):
        console_level = getattr(
            logging, str(logging_config.get("console_level", "WARNING")).upper(), logging.WARNING
        )
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
        console_handler.setLevel(console_level)

    error_file_handler = None
    if logging_config.get("separate_error_log", False):
        error_file_handler = _rotating_handler(
            os.path.join(log_dir, "error.log"), logging.ERROR, 1024 * 1024, 3, file_formatter
        )

    root_logger = logging.getLogger()
    root_logger.handlers = []
    for handler in (file_handler, console_handler, error_file_handler):
        if handler is not None:
            root_logger.addHandler(handler)
    root_logger.setLevel(file_level)

    # Key events stay out of the main log.
    KEY_LOGGER.propagate = False
    KEY_LOGGER.setLevel(logging.DEBUG)
    KEY_LOGGER.handlers = []
    KEY_LOGGER.disabled = False

    key_trace_handler = None
    if keytrace_enabled():
        key_trace_filename = os.path.join(log_dir, "keytrace.log")
        key_trace_handler = _rotating_handler(
            key_trace_filename,
            logging.DEBUG,
            1024 * 1024,
            3,
            logging.Formatter("%(asctime)s - %(message)s"),
        )
    if key_trace_handler is not None:
        KEY_LOGGER.addHandler(key_trace_handler)
        logging.info("Key event tracing enabled, logging to '%s'.", key_trace_handler.baseFilename)
    else:
        KEY_LOGGER.addHandler(logging.NullHandler())
        KEY_LOGGER.disabled = True
        logging.debug("Key event tracing is disabled.")

    logging.info(
        "Logging setup complete. Root logger level: %s.", logging.getLevelName(root_logger.level)
    )
    if file_handler is not None:
        logging.info(f"File logging to '{log_filename}' at level: {logging.getLevelName(file_level)}.")
