"""Main FamilyGraph facade combining all operations."""

import asyncio
from contextlib import nullcontext
from typing import Any, Optional, Union

from pydantic import ValidationError as PydanticValidationError

from ancestree.config import settings
from ancestree.errors import ValidationError
from ancestree.graph.family.person import PersonOperations
from ancestree.graph.family.queries import FamilyQueries
from ancestree.graph.family.relationships import RelationshipOperations
from ancestree.graph.family.snapshot import FamilySnapshot
from ancestree.graph.models import FamilyTree, FamilyTreeExport
from ancestree.graph.storage.base import ChangeCallback, FamilyStorage, Unsubscribe
from ancestree.logging import get_logger
from ancestree.models import Member, Relationship, RelationshipType
from ancestree.validation import validate_name, validate_tree_export

logger = get_logger(__name__)


class FamilyGraph:
    """
    Main interface for family graph operations.

    Combines member, relationship, and query operations over an injected
    storage backend. Results are detached copies; re-query after mutating.

    Usage:
        graph = FamilyGraph(InMemoryStorage())
        ramesh = await graph.add_member("Ramesh", date_of_birth="1950-04-02")
        padma = await graph.add_member("Padma")
        await graph.add_relationship("spouse", ramesh.id, padma.id)
        tree = await graph.get_family_tree(ramesh.id)
    """

    def __init__(self, storage: FamilyStorage, propagate: Optional[bool] = None,
                 serialize_mutations: Optional[bool] = None):
        self.storage = storage
        if propagate is None:
            propagate = settings.engine.propagate_spouse_children
        if serialize_mutations is None:
            serialize_mutations = settings.engine.serialize_mutations

        # Compose operations
        self.persons = PersonOperations(storage)
        self.relationships = RelationshipOperations(storage, propagate=propagate)
        self.queries = FamilyQueries(storage)

        self._lock = asyncio.Lock() if serialize_mutations else None

    def _mutation(self):
        """Serialize writers on this instance when locking is enabled."""
        return self._lock if self._lock is not None else nullcontext()

    # ─────────────────────────────────────────
    # Member operations (delegated)
    # ─────────────────────────────────────────

    async def add_member(self, name: str, **fields) -> Member:
        async with self._mutation():
            return await self.persons.add(name, **fields)

    async def get_member(self, member_id: str) -> Optional[Member]:
        return await self.persons.get(member_id)

    async def get_all_members(self) -> list[Member]:
        return await self.persons.get_all()

    async def update_member(self, member_id: str, **changes) -> Member:
        async with self._mutation():
            return await self.persons.update(member_id, **changes)

    async def delete_member(self, member_id: str) -> None:
        async with self._mutation():
            await self.persons.delete(member_id)

    # ─────────────────────────────────────────
    # Relationship operations (delegated)
    # ─────────────────────────────────────────

    async def add_relationship(self, kind: Union[RelationshipType, str], person1_id: str,
                               person2_id: str, marriage_date: Optional[str] = None,
                               divorce_date: Optional[str] = None) -> Relationship:
        async with self._mutation():
            return await self.relationships.add(
                kind, person1_id, person2_id,
                marriage_date=marriage_date, divorce_date=divorce_date,
            )

    async def add_parent_child(self, parent_id: str, child_id: str) -> Relationship:
        return await self.add_relationship(RelationshipType.PARENT_CHILD, parent_id, child_id)

    async def add_spouse(self, person1_id: str, person2_id: str, marriage_date: Optional[str] = None,
                         divorce_date: Optional[str] = None) -> Relationship:
        return await self.add_relationship(
            RelationshipType.SPOUSE, person1_id, person2_id,
            marriage_date=marriage_date, divorce_date=divorce_date,
        )

    async def add_sibling(self, person1_id: str, person2_id: str) -> Relationship:
        return await self.add_relationship(RelationshipType.SIBLING, person1_id, person2_id)

    async def delete_relationship(self, relationship_id: str) -> None:
        async with self._mutation():
            await self.relationships.delete(relationship_id)

    async def get_relationship(self, relationship_id: str) -> Optional[Relationship]:
        return await self.relationships.get(relationship_id)

    async def get_all_relationships(self) -> list[Relationship]:
        return await self.relationships.get_all()

    async def get_relationships_for_member(self, member_id: str) -> list[Relationship]:
        return await self.relationships.get_for_member(member_id)

    async def find_existing_relationship(self, kind: Union[RelationshipType, str], person1_id: str,
                                         person2_id: str) -> Optional[Relationship]:
        return await self.relationships.find_existing(kind, person1_id, person2_id)

    async def would_create_parent_cycle(self, parent_id: str, child_id: str) -> bool:
        return await self.relationships.would_create_parent_cycle(parent_id, child_id)

    # ─────────────────────────────────────────
    # Query operations (delegated)
    # ─────────────────────────────────────────

    async def snapshot(self) -> FamilySnapshot:
        """Load a point-in-time view to share across several queries."""
        return await FamilySnapshot.load(self.storage)

    async def get_parents(self, member_id: str, snapshot: Optional[FamilySnapshot] = None) -> list[Member]:
        return await self.queries.get_parents(member_id, snapshot)

    async def get_children(self, member_id: str, snapshot: Optional[FamilySnapshot] = None) -> list[Member]:
        return await self.queries.get_children(member_id, snapshot)

    async def get_spouses(self, member_id: str, snapshot: Optional[FamilySnapshot] = None) -> list[Member]:
        return await self.queries.get_spouses(member_id, snapshot)

    async def get_siblings(self, member_id: str, snapshot: Optional[FamilySnapshot] = None) -> list[Member]:
        return await self.queries.get_siblings(member_id, snapshot)

    async def get_ancestors(self, member_id: str, snapshot: Optional[FamilySnapshot] = None) -> list[Member]:
        return await self.queries.get_ancestors(member_id, snapshot)

    async def get_descendants(self, member_id: str, snapshot: Optional[FamilySnapshot] = None) -> list[Member]:
        return await self.queries.get_descendants(member_id, snapshot)

    async def get_family_tree(self, member_id: str) -> FamilyTree:
        return await self.queries.get_family_tree(member_id)

    # ─────────────────────────────────────────
    # Bulk operations
    # ─────────────────────────────────────────

    async def export_tree(self) -> FamilyTreeExport:
        return await self.storage.export_tree(settings.engine.export_version)

    async def import_tree(self, data: Union[FamilyTreeExport, dict[str, Any]],
                          clear_existing: bool = False) -> None:
        """Check the snapshot's structure and hand it to storage.

        Member names are trimmed; everything else is stored as given.
        """
        raw = data.to_dict() if isinstance(data, FamilyTreeExport) else data
        validate_tree_export(raw)
        try:
            export = FamilyTreeExport.from_dict(raw)
        except PydanticValidationError as e:
            problems = [
                f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}"
                for err in e.errors()
            ]
            raise ValidationError(f"Invalid tree data ({len(problems)} problems)", problems) from None
        for member in export.members:
            member.name = validate_name(member.name)

        async with self._mutation():
            await self.storage.import_tree(export, clear_existing=clear_existing)
        logger.info(
            "tree.imported",
            members=len(export.members),
            relationships=len(export.relationships),
            cleared=clear_existing,
        )

    async def clear_all(self) -> None:
        async with self._mutation():
            await self.storage.clear_all()

    def on_change(self, callback: ChangeCallback) -> Unsubscribe:
        return self.storage.on_change(callback)

