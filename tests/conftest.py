"""
Root test configuration and fixtures for the registration engine.

- unit/: Fast, isolated unit tests (no network; the upstream API is mocked)

Note: sys.path manipulation is handled here to ensure imports work correctly.
"""

from __future__ import annotations

import sys
from pathlib import Path
from unittest.mock import AsyncMock

import pytest

# Add project root to path to allow imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from enrollment.config.settings import Settings, get_settings  # noqa: E402
from tests.fixtures.gateway import create_mock_gateway  # noqa: E402


@pytest.fixture
def mock_gateway() -> AsyncMock:
    return create_mock_gateway()


@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None)


@pytest.fixture(autouse=True)
def clear_settings_cache():
    """Settings are cached per process; reload them for every test."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
