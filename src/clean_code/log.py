"""Operational logging for clean-code.

Every run appends to ``.clean_code/clean_code.log`` in the project; warnings
and errors are also echoed to stderr. ``CLEAN_CODE_LOG_LEVEL`` (a level name
or number) overrides the file handler level.
"""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path

LOGGER_NAME = "clean_code"
LOG_FILENAME = "clean_code.log"
LOG_LEVEL_ENV = "CLEAN_CODE_LOG_LEVEL"

FILE_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
STREAM_FORMAT = "[%(levelname)s] %(message)s"
DEBUG_STREAM_FORMAT = "[%(levelname)s] [%(filename)s:%(lineno)d] [%(funcName)s] %(message)s"


def resolve_env_log_level() -> int | None:
    """Return a logging level from the environment or None if unset or unknown."""
    val = os.environ.get(LOG_LEVEL_ENV)
    if not val:
        return None
    v = val.strip().upper()
    if v.isdigit():
        return int(v)
    level = logging.getLevelName(v)
    return level if isinstance(level, int) else None


def setup_logging(log_file: Path | None = None, *, verbose: bool = False) -> logging.Logger:
    """Configure the ``clean_code`` logger; safe to call more than once."""
    logger = logging.getLogger(LOGGER_NAME)
    file_level = resolve_env_log_level() or (logging.DEBUG if verbose else logging.INFO)
    stream_level = logging.DEBUG if verbose else logging.WARNING

    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
        handler.close()

    stream = logging.StreamHandler(sys.stderr)
    stream.setLevel(stream_level)
    stream.setFormatter(logging.Formatter(DEBUG_STREAM_FORMAT if verbose else STREAM_FORMAT))
    logger.addHandler(stream)

    if log_file is not None:
        try:
            log_file.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(log_file, encoding="utf-8")
        except OSError as exc:
            logger.warning("Operational log disabled, cannot open %s: %s", log_file, exc)
        else:
            file_handler.setLevel(file_level)
            file_handler.setFormatter(logging.Formatter(FILE_FORMAT))
            logger.addHandler(file_handler)

    logger.setLevel(min(file_level, stream_level))
    return logger
