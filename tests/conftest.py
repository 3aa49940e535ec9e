# tests/conftest.py

"""Shared pytest fixtures for all carsbg tests."""

from collections.abc import Generator
from unittest.mock import patch

import pytest

from carsbg.config.settings import Settings


@pytest.fixture(autouse=True)
def no_page_delay() -> Generator[None, None, None]:
    """Drop the pause between result pages so search loops run instantly."""
    with patch.object(Settings, "REQUEST_DELAY", 0.0):
        yield
