"""Shared pytest fixtures."""

import pytest

from ancestree.graph.family.graph import FamilyGraph
from ancestree.graph.storage.memory import InMemoryStorage
from ancestree.graph.storage.sqlite import SQLiteStorage


@pytest.fixture
def storage():
    """Fresh in-memory storage."""
    return InMemoryStorage()


@pytest.fixture
def graph(storage):
    """FamilyGraph over in-memory storage."""
    return FamilyGraph(storage)


@pytest.fixture
def sqlite_storage(tmp_path):
    """SQLite storage in a temp directory."""
    return SQLiteStorage(db_path=str(tmp_path / "tree.db"))
