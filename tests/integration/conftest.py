"""Fixtures for CLI integration tests."""

import logging

import pytest


@pytest.fixture(autouse=True)
def reset_root_logger():
    """Save and restore root logger state; the CLI reconfigures logging."""
    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    yield
    root.handlers[:] = original_handlers
    root.setLevel(original_level)
