"""Relationship operations between members.

Every mutation is guarded against structural violations before anything is
written. Adding a spouse or parent-child edge also creates the parent-child
edges that marriage implies.
"""

from typing import Optional, Union

from ancestree.errors import (
    CycleError,
    DuplicateRelationshipError,
    MemberNotFoundError,
    RelationshipNotFoundError,
    SelfRelationshipError,
    ValidationError,
)
from ancestree.graph.family.snapshot import FamilySnapshot
from ancestree.graph.storage.base import FamilyStorage
from ancestree.logging import get_logger
from ancestree.models import Member, Relationship, RelationshipType, create_relationship
from ancestree.validation import validate_parent_child_dates, validate_relationship_dates

logger = get_logger(__name__)


def _kind(value: Union[RelationshipType, str]) -> RelationshipType:
    try:
        return RelationshipType(value)
    except ValueError:
        valid = ", ".join(k.value for k in RelationshipType)
        raise ValidationError(f"Unknown relationship type '{value}' (expected one of {valid})") from None


class RelationshipOperations:
    """Consistency-checked operations for family relationships."""

    def __init__(self, storage: FamilyStorage, propagate: bool = True):
        self.storage = storage
        self.propagate = propagate

    async def _require_member(self, member_id: str) -> Member:
        member = await self.storage.get_member(member_id)
        if member is None:
            raise MemberNotFoundError(member_id)
        return member

    # ─────────────────────────────────────────
    # Checks
    # ─────────────────────────────────────────

    def _check_parent_child(self, snapshot: FamilySnapshot, parent: Member, child: Member) -> None:
        if child.id in snapshot.ancestor_ids(parent.id):
            raise CycleError(
                f"'{child.name}' is already an ancestor of '{parent.name}'; "
                "this would create a circular parent chain"
            )
        validate_parent_child_dates(parent, child)

    async def would_create_parent_cycle(self, parent_id: str, child_id: str,
                                        snapshot: Optional[FamilySnapshot] = None) -> bool:
        """True if child_id is already in the ancestor closure of parent_id."""
        view = snapshot if snapshot is not None else await FamilySnapshot.load(self.storage)
        return child_id in view.ancestor_ids(parent_id)

    async def find_existing(self, kind: Union[RelationshipType, str], person1_id: str,
                            person2_id: str) -> Optional[Relationship]:
        """Existing edge of `kind` between the pair, honouring direction for parent-child."""
        kind = _kind(kind)
        for rel in await self.storage.get_relationships_for_member(person1_id):
            if rel.connects(kind, person1_id, person2_id):
                return rel
        return None

    # ─────────────────────────────────────────
    # Mutations
    # ─────────────────────────────────────────

    async def add(self, kind: Union[RelationshipType, str], person1_id: str, person2_id: str,
                  marriage_date: Optional[str] = None, divorce_date: Optional[str] = None) -> Relationship:
        """Add a relationship; for parent-child, person1 is the parent.

        Returns the primary edge only. Derived edges are created afterwards.
        """
        kind = _kind(kind)

        if person1_id == person2_id:
            raise SelfRelationshipError("Cannot create a relationship with oneself")

        person1 = await self._require_member(person1_id)
        person2 = await self._require_member(person2_id)

        snapshot = await FamilySnapshot.load(self.storage)

        if snapshot.find(kind, person1_id, person2_id) is not None:
            raise DuplicateRelationshipError(
                f"A {kind.value} relationship between '{person1.name}' and '{person2.name}' already exists"
            )

        validate_relationship_dates(kind, marriage_date, divorce_date)

        if kind == RelationshipType.PARENT_CHILD:
            self._check_parent_child(snapshot, person1, person2)

        relationship = create_relationship(
            kind, person1_id, person2_id,
            marriage_date=marriage_date or None,
            divorce_date=divorce_date or None,
        )
        await self.storage.save_relationship(relationship)
        snapshot.add(relationship)
        logger.info(
            "relationship.added",
            relationship_id=relationship.id,
            type=kind.value,
            person1_id=person1_id,
            person2_id=person2_id,
        )

        if self.propagate:
            await self._propagate(relationship, snapshot)

        return relationship

    async def _propagate(self, trigger: Relationship, snapshot: FamilySnapshot) -> list[Relationship]:
        """Create the parent-child edges implied by a new spouse or parent-child edge."""
        pairs: list[tuple[str, str]] = []

        if trigger.type == RelationshipType.SPOUSE:
            a, b = trigger.person1_id, trigger.person2_id
            pairs.extend((b, child_id) for child_id in snapshot.child_ids(a))
            pairs.extend((a, child_id) for child_id in snapshot.child_ids(b))
        elif trigger.type == RelationshipType.PARENT_CHILD:
            parent_id, child_id = trigger.person1_id, trigger.person2_id
            pairs.extend((spouse_id, child_id) for spouse_id in snapshot.spouse_ids(parent_id))

        derived = []
        for parent_id, child_id in pairs:
            rel = await self._add_derived(snapshot, parent_id, child_id, trigger)
            if rel is not None:
                derived.append(rel)
        return derived

    async def _add_derived(self, snapshot: FamilySnapshot, parent_id: str, child_id: str,
                           trigger: Relationship) -> Optional[Relationship]:
        """Add one derived parent-child edge, skipping it if it breaks an invariant."""
        if snapshot.find(RelationshipType.PARENT_CHILD, parent_id, child_id) is not None:
            return None

        try:
            if parent_id == child_id:
                raise SelfRelationshipError("Derived edge would relate a member to themselves")
            parent = snapshot.member(parent_id)
            child = snapshot.member(child_id)
            if parent is None or child is None:
                raise MemberNotFoundError(child_id if parent is not None else parent_id)
            self._check_parent_child(snapshot, parent, child)
        except (ValidationError, MemberNotFoundError) as e:
            logger.warning(
                "relationship.derived_skipped",
                trigger_id=trigger.id,
                parent_id=parent_id,
                child_id=child_id,
                reason=str(e),
                error=type(e).__name__,
            )
            return None

        rel = create_relationship(RelationshipType.PARENT_CHILD, parent_id, child_id)
        await self.storage.save_relationship(rel)
        snapshot.add(rel)
        logger.info(
            "relationship.derived",
            relationship_id=rel.id,
            trigger_id=trigger.id,
            parent_id=parent_id,
            child_id=child_id,
        )
        return rel

    async def delete(self, relationship_id: str) -> None:
        """Delete one edge. Edges derived from it earlier are left in place."""
        if await self.storage.get_relationship(relationship_id) is None:
            raise RelationshipNotFoundError(relationship_id)
        await self.storage.delete_relationship(relationship_id)
        logger.info("relationship.deleted", relationship_id=relationship_id)

    # ─────────────────────────────────────────
    # Reads
    # ─────────────────────────────────────────

    async def get(self, relationship_id: str) -> Optional[Relationship]:
        return await self.storage.get_relationship(relationship_id)

    async def get_all(self) -> list[Relationship]:
        return await self.storage.get_all_relationships()

    async def get_for_member(self, member_id: str) -> list[Relationship]:
        return await self.storage.get_relationships_for_member(member_id)
