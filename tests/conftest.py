"""Shared pytest fixtures for the cut sheet test suite.

Provides:
- catalog: the built-in SchemaCatalog (loaded once per session)
"""

import pytest

from src.catalog.registry import SchemaCatalog


@pytest.fixture(scope="session")
def catalog() -> SchemaCatalog:
    """Built-in catalog; read-only, so safe to share."""
    return SchemaCatalog()
