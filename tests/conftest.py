# tests/conftest.py
"""
Pytest configuration and fixtures.
"""

import os
from pathlib import Path

import bson
import pytest

from gridfile.registry import FileRegistry, reset_registry
from gridfile.storage import MemoryDatabase, MemoryGridEngine

# Set test environment
os.environ.setdefault("TESTING", "1")

FIXTURES_DIR = Path(__file__).parent / "fixtures"


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "mongo: tests requiring a MongoDB server (set MONGODB_TEST_URL)")


@pytest.fixture
def memory_db():
    """Fresh in-memory database handle."""
    return MemoryDatabase()


@pytest.fixture
def registry(memory_db):
    """Registry backed by the in-memory engine."""
    return FileRegistry(memory_db, bson, engine_factory=MemoryGridEngine)


@pytest.fixture
def text_path():
    """Path of a small text fixture."""
    return FIXTURES_DIR / "text.txt"


@pytest.fixture(autouse=True)
def _reset_global_registry():
    """Keep the process-wide registry from leaking between tests."""
    yield
    reset_registry()
