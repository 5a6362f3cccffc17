"""Pytest configuration for all tests."""

import pytest

from postcollections.core.config import get_settings


@pytest.fixture(autouse=True)
def _reset_settings_cache():
    """Make every test read settings from its own environment."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
