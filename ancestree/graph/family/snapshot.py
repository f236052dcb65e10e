"""Point-in-time view of the family graph.

Members by id, a flat edge list, and an index from member id to its
incident edges. Built fresh from storage for a single call and never
cached across calls.
"""

from collections import deque
from typing import Iterable, Optional

from ancestree.graph.storage.base import FamilyStorage
from ancestree.models import Member, Relationship, RelationshipType


class FamilySnapshot:
    """Edge list plus member -> incident edges index."""

    def __init__(self, members: Iterable[Member], relationships: Iterable[Relationship]):
        self.members: dict[str, Member] = {m.id: m for m in members}
        self.relationships: list[Relationship] = []
        self._incident: dict[str, list[Relationship]] = {}
        for rel in relationships:
            self.add(rel)

    @classmethod
    async def load(cls, storage: FamilyStorage) -> "FamilySnapshot":
        members = await storage.get_all_members()
        relationships = await storage.get_all_relationships()
        return cls(members, relationships)

    def add(self, rel: Relationship) -> None:
        """Record an edge written during the current call."""
        self.relationships.append(rel)
        self._incident.setdefault(rel.person1_id, []).append(rel)
        if rel.person2_id != rel.person1_id:
            self._incident.setdefault(rel.person2_id, []).append(rel)

    def incident(self, member_id: str) -> list[Relationship]:
        return self._incident.get(member_id, [])

    def member(self, member_id: str) -> Optional[Member]:
        return self.members.get(member_id)

    def resolve(self, member_ids: Iterable[str]) -> list[Member]:
        """Detached member copies for ids, skipping dangling ones."""
        return [
            self.members[mid].model_copy(deep=True)
            for mid in member_ids
            if mid in self.members
        ]

    # ─────────────────────────────────────────
    # One-hop neighbours
    # ─────────────────────────────────────────

    def parent_ids(self, member_id: str) -> list[str]:
        return _unique(
            r.person1_id for r in self.incident(member_id)
            if r.type == RelationshipType.PARENT_CHILD and r.person2_id == member_id
        )

    def child_ids(self, member_id: str) -> list[str]:
        return _unique(
            r.person2_id for r in self.incident(member_id)
            if r.type == RelationshipType.PARENT_CHILD and r.person1_id == member_id
        )

    def spouse_ids(self, member_id: str) -> list[str]:
        return _unique(
            r.other(member_id) for r in self.incident(member_id)
            if r.type == RelationshipType.SPOUSE
        )

    def sibling_ids(self, member_id: str) -> list[str]:
        """Declared siblings plus anyone sharing at least one parent."""
        declared = (
            r.other(member_id) for r in self.incident(member_id)
            if r.type == RelationshipType.SIBLING
        )
        via_parents = (
            child_id
            for parent_id in self.parent_ids(member_id)
            for child_id in self.child_ids(parent_id)
        )
        return [
            mid for mid in _unique(list(declared) + list(via_parents))
            if mid != member_id
        ]

    # ─────────────────────────────────────────
    # Closures
    # ─────────────────────────────────────────

    def ancestor_ids(self, member_id: str) -> list[str]:
        return self._closure(member_id, self.parent_ids)

    def descendant_ids(self, member_id: str) -> list[str]:
        return self._closure(member_id, self.child_ids)

    def _closure(self, start_id: str, step) -> list[str]:
        """Breadth-first walk bounded by a visited set.

        The start member is marked visited up front, so it is never part of
        its own closure even when the stored edges contain a loop.
        """
        visited = {start_id}
        found: list[str] = []
        queue = deque([start_id])
        while queue:
            current = queue.popleft()
            for next_id in step(current):
                if next_id in visited:
                    continue
                visited.add(next_id)
                found.append(next_id)
                queue.append(next_id)
        return found

    def find(self, kind: RelationshipType, person1_id: str, person2_id: str) -> Optional[Relationship]:
        for rel in self.incident(person1_id):
            if rel.connects(kind, person1_id, person2_id):
                return rel
        return None


def _unique(ids: Iterable[str]) -> list[str]:
    return list(dict.fromkeys(ids))
