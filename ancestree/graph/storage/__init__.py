"""Storage backends for the family graph."""
from ancestree.graph.storage.base import FamilyStorage
from ancestree.graph.storage.memory import InMemoryStorage
from ancestree.graph.storage.sqlite import SQLiteStorage

__all__ = ["FamilyStorage", "InMemoryStorage", "SQLiteStorage"]
