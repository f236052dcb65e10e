"""Ancestree - family relationship graph engine."""

from ancestree.errors import (
    AncestreeError,
    ChronologyError,
    CycleError,
    DuplicateRelationshipError,
    InvalidDate,
    InvalidDateError,
    MemberNotFoundError,
    NotFoundError,
    RelationshipNotFoundError,
    SelfRelationshipError,
    ValidationError,
)
from ancestree.models import Member, Relationship, RelationshipType
from ancestree.graph import FamilyGraph, FamilyStorage, FamilyTree, FamilyTreeExport, InMemoryStorage, SQLiteStorage

__version__ = "0.1.0"

__all__ = [
    "AncestreeError",
    "ChronologyError",
    "CycleError",
    "DuplicateRelationshipError",
    "InvalidDate",
    "InvalidDateError",
    "MemberNotFoundError",
    "NotFoundError",
    "RelationshipNotFoundError",
    "SelfRelationshipError",
    "ValidationError",
    "Member",
    "Relationship",
    "RelationshipType",
    "FamilyGraph",
    "FamilyStorage",
    "FamilyTree",
    "FamilyTreeExport",
    "InMemoryStorage",
    "SQLiteStorage",
]
