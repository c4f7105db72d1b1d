from __future__ import annotations

import logging as py_logging
import os
from pathlib import Path
from typing import Iterator

import pytest

from core.logging import LOGGER_NAME


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    for key in list(os.environ):
        if key.upper().startswith("JAMSOCKET_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.chdir(tmp_path)


@pytest.fixture(autouse=True)
def reset_jamsocket_logger() -> Iterator[None]:
    yield
    logger = py_logging.getLogger(LOGGER_NAME)
    logger.handlers.clear()
    logger.setLevel(py_logging.NOTSET)
    logger.propagate = True
