"""Pytest configuration helpers for test collection.

Ensure the project root is on sys.path so tests can import the package
without requiring it to be installed, and provide shared fixtures.
"""
import sys
from pathlib import Path

import pytest


def pytest_configure(config):
    # Insert repo root (one level up from tests/) to sys.path
    repo_root = Path(__file__).resolve().parents[1]
    sys.path.insert(0, str(repo_root))


class RecordCollector:
    """Log handler keeping every record it receives."""

    def __init__(self):
        self.records = []

    def handle(self, record):
        self.records.append(record)

    @property
    def last(self):
        return self.records[-1]

    @property
    def details(self):
        return [r.details for r in self.records]


@pytest.fixture
def collector():
    return RecordCollector()


@pytest.fixture
def memory_storage():
    from storage_util.storage.memory_backend import MemoryStorage
    return MemoryStorage(key_prefix="app")


@pytest.fixture(autouse=True)
def _reset_defaults():
    import logging
    from storage_util import defaults
    package_logger = logging.getLogger("storage_util")
    level = package_logger.level
    defaults.reset_defaults()
    yield
    defaults.reset_defaults()
    package_logger.setLevel(level)
