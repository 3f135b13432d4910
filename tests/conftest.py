"""Shared test fixtures for Grocery Budget."""

import pytest

from grocery_budget.data_store import DataStore
from grocery_budget.sqlite_store import SQLiteStore


@pytest.fixture
def temp_data_dir(tmp_path):
    """Create a temporary data directory."""
    data_dir = tmp_path / "test_data"
    data_dir.mkdir()
    return data_dir


@pytest.fixture
def data_store(temp_data_dir):
    """Create a DataStore with temporary directory."""
    return DataStore(data_dir=temp_data_dir)


@pytest.fixture
def sqlite_store(temp_data_dir):
    """Create a SQLiteStore with temporary database."""
    return SQLiteStore(db_path=temp_data_dir / "test.db")


@pytest.fixture(params=["json", "sqlite"])
def store(request, temp_data_dir):
    """Run a test against both storage backends."""
    if request.param == "sqlite":
        return SQLiteStore(db_path=temp_data_dir / "test.db")
    return DataStore(data_dir=temp_data_dir)
