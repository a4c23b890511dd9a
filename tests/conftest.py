# tests/conftest.py

"""Shared pytest fixtures for all pricematch tests."""

from collections.abc import Generator
from unittest.mock import patch

import pytest

from pricematch.config.settings import Settings


@pytest.fixture(autouse=True)
def rapidapi_key() -> Generator[None, None, None]:
    """Give every test a configured API key unless it overrides it."""
    with patch.object(Settings, "RAPIDAPI_KEY", "test-key"):
        yield
