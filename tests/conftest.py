# tests/conftest.py

"""Shared pytest fixtures."""

from collections.abc import Generator

import pytest

from app.dependencies import get_product_service
from app.main import app


@pytest.fixture(autouse=True)
def clear_dependency_overrides() -> Generator[None, None, None]:
    """Make sure no test leaks a ProductService override into the next one."""
    yield
    app.dependency_overrides.pop(get_product_service, None)
