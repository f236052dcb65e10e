"""Graph package - family relationship engine over pluggable storage."""

from ancestree.graph.models import FamilyTree, FamilyTreeExport
from ancestree.graph.family.graph import FamilyGraph
from ancestree.graph.storage import FamilyStorage, InMemoryStorage, SQLiteStorage

__all__ = [
    "FamilyTree",
    "FamilyTreeExport",
    "FamilyGraph",
    "FamilyStorage",
    "InMemoryStorage",
    "SQLiteStorage",
]
