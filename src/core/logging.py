"""Application logging helpers."""

from __future__ import annotations

import logging as py_logging
import sys
from typing import TextIO

LOGGER_NAME = "jamsocket"
LOG_LEVELS = {
    "DEBUG": py_logging.DEBUG,
    "INFO": py_logging.INFO,
    "WARN": py_logging.WARNING,
    "WARNING": py_logging.WARNING,
    "ERROR": py_logging.ERROR,
}
_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def get_logger(name: str) -> py_logging.Logger:
    """Child logger of the `jamsocket` tree, e.g. `jamsocket.adapters.api_client`."""

    return py_logging.getLogger(f"{LOGGER_NAME}.{name}")


def configure_logging(level: str = "WARNING", stream: TextIO | None = None) -> py_logging.Logger:
    resolved = LOG_LEVELS.get(level.upper(), py_logging.WARNING)

    logger = py_logging.getLogger(LOGGER_NAME)
    logger.setLevel(resolved)
    logger.handlers.clear()

    handler = py_logging.StreamHandler(stream or sys.stderr)
    handler.setLevel(resolved)
    handler.setFormatter(py_logging.Formatter(_FORMAT))
    logger.addHandler(handler)

    logger.propagate = False
    return logger
