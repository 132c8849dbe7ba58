import logging
import sys
import os

import pytest

# Add the project root to sys.path
project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if project_root not in sys.path:
    sys.path.insert(0, project_root)

from gradientgen.config import GradientConfig


class FakeClock:
    """Settable clock for backends."""

    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float = 1.0) -> float:
        self.now += seconds
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def config(tmp_path):
    return GradientConfig(cache_dir=tmp_path / "cache")


@pytest.fixture(autouse=True)
def restore_package_logger():
    """Drop handlers that configure_logging attached during a test."""
    logger = logging.getLogger("gradientgen")
    handlers = list(logger.handlers)
    level = logger.level
    yield
    logger.handlers = handlers
    logger.setLevel(level)
