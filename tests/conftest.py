# tests/conftest.py
"""
Shared pytest setup for the SixNine tests.

Puts the project root on sys.path so the flat component modules import
without an installed package.
"""

import logging
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from infrastructure.cache_manager import reset_cache_manager  # noqa: E402


@pytest.fixture
def fresh_cache_manager():
    """Fixture: empty CacheManager singleton, reset again afterwards"""
    reset_cache_manager()
    yield
    reset_cache_manager()


@pytest.fixture
def restore_logging():
    """Fixture: remove the handlers installed by setup_logging() after the test"""
    from component_5_logging_config import PERFORMANCE_LOGGER_NAME, SixNineLogFormatter

    root = logging.getLogger()
    perf = logging.getLogger(PERFORMANCE_LOGGER_NAME)
    level, propagate = root.level, perf.propagate
    yield
    for logger in (root, perf):
        for handler in list(logger.handlers):
            if isinstance(handler.formatter, SixNineLogFormatter):
                logger.removeHandler(handler)
                handler.close()
    root.setLevel(level)
    perf.propagate = propagate
