"""Logging setup shared by the hook and check commands.

Diagnostics are written to stderr, so log records that reach the console
would be mixed into the hook's report. The console handler therefore stays at
WARNING (ERROR in quiet mode) unless verbose output was asked for, and the
complete DEBUG trail goes to the optional log file.
"""

from __future__ import annotations

import logging
from pathlib import Path

_LOGGER_NAME = "entitylint"
_CONSOLE_FORMAT = "[entitylint] %(levelname)s %(message)s"
_FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a logger below ``entitylint``; ``get_logger("engine")`` is ``entitylint.engine``."""
    return logging.getLogger(f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME)


def configure_logging(
    *,
    verbose: bool = False,
    log_file: Path | None = None,
    quiet: bool = False,
) -> logging.Logger:
    """(Re)build the entitylint handlers.

    ``quiet`` is used by the hook: its stderr must stay empty for files that
    are skipped or clean. A log file that cannot be opened is skipped.
    """
    if verbose:
        console_level = logging.DEBUG
    elif quiet:
        console_level = logging.ERROR
    else:
        console_level = logging.WARNING

    logger = logging.getLogger(_LOGGER_NAME)
    logger.propagate = False
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console = logging.StreamHandler()
    console.setLevel(console_level)
    console.setFormatter(logging.Formatter(_CONSOLE_FORMAT))
    logger.addHandler(console)
    logger.setLevel(console_level)

    if log_file is None:
        return logger
    try:
        sink = logging.FileHandler(log_file, encoding="utf-8")
    except OSError as exc:
        logger.debug("Log file %s unavailable, continuing without it: %s", log_file, exc)
        return logger
    sink.setLevel(logging.DEBUG)
    sink.setFormatter(logging.Formatter(_FILE_FORMAT))
    logger.addHandler(sink)
    logger.setLevel(logging.DEBUG)
    return logger


__all__ = ["configure_logging", "get_logger"]
