"""Root conftest.py for FoodBridge test suite.

This file contains project-wide fixtures and pytest configuration.
"""

from collections.abc import Generator

import pytest

from src.core.config import get_settings
from src.core.error_context import _get_sensitive_fields
from src.domain.records.registry import get_schema_registry


def pytest_configure(config: pytest.Config) -> None:
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "unit: Unit tests that test individual components in isolation"
    )
    config.addinivalue_line(
        "markers", "integration: Integration tests that test multiple components"
    )


@pytest.fixture(autouse=True)
def clean_lru_cache() -> Generator[None]:
    """Clear cached settings and registries before and after each test."""
    get_settings.cache_clear()
    _get_sensitive_fields.cache_clear()
    get_schema_registry.cache_clear()
    yield
    get_settings.cache_clear()
    _get_sensitive_fields.cache_clear()
    get_schema_registry.cache_clear()
