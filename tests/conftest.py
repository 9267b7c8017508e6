from __future__ import annotations

import logging
from collections.abc import Generator
from pathlib import Path

import pytest

from querykit.utils.logging import ROOT_LOGGER_NAME

here = Path(__file__).parent
root_path = here.parent


@pytest.fixture
def querykit_logger() -> Generator[logging.Logger, None, None]:
    """The package root logger, restored to its original state afterwards."""
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    handlers, level, propagate = list(logger.handlers), logger.level, logger.propagate
    yield logger
    logger.handlers[:] = handlers
    logger.setLevel(level)
    logger.propagate = propagate
