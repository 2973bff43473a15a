"""Global pytest configuration and fixtures."""

import sys
from pathlib import Path

import pytest

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from sqlbackup.logger import shutdown_logger
from tests.fakes import FakeEngine


@pytest.fixture
def fake_engine():
    return FakeEngine(databases=["alpha", "beta"])


@pytest.fixture(autouse=True)
def reset_logger():
    """Make sure a test never leaves the queue listener running."""
    yield
    shutdown_logger()
