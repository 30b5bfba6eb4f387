from __future__ import annotations

import logging
from datetime import datetime

import pytest

from upcheck.logger_config import ROOT_LOGGER


@pytest.fixture(autouse=True)
def _reset_app_logger():
    yield
    logger = logging.getLogger(ROOT_LOGGER)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def t0() -> datetime:
    return datetime(2026, 1, 1, 10, 0, 0)
