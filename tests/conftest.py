"""Pytest configuration helpers for test collection.

Ensure the project root is on sys.path so tests can import the package
without requiring it to be installed.
"""
import logging
import sys
from pathlib import Path

import pytest


def pytest_configure(config):
    # Insert repo root (one level up from tests/) to sys.path
    repo_root = Path(__file__).resolve().parents[1]
    sys.path.insert(0, str(repo_root))


@pytest.fixture(autouse=True)
def restore_root_logging():
    # configure_logging installs its own root handlers; drop them afterwards
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    for h in root.handlers[:]:
        if h not in handlers:
            root.removeHandler(h)
    root.setLevel(level)
