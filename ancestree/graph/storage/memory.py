"""In-memory storage backend."""

from typing import Optional

from ancestree.graph.models import FamilyTreeExport
from ancestree.graph.storage.base import FamilyStorage
from ancestree.models import Member, Relationship


class InMemoryStorage(FamilyStorage):
    """Dict-backed storage, mainly for tests and scratch sessions.

    Keeps a member id -> relationship ids index so per-member lookups
    do not scan every edge.
    """

    def __init__(self):
        super().__init__()
        self._members: dict[str, Member] = {}
        self._relationships: dict[str, Relationship] = {}
        self._by_member: dict[str, set[str]] = {}

    def _index(self, rel: Relationship) -> None:
        for member_id in (rel.person1_id, rel.person2_id):
            self._by_member.setdefault(member_id, set()).add(rel.id)

    def _unindex(self, rel: Relationship) -> None:
        for member_id in (rel.person1_id, rel.person2_id):
            ids = self._by_member.get(member_id)
            if ids is not None:
                ids.discard(rel.id)
                if not ids:
                    del self._by_member[member_id]

    async def get_member(self, member_id: str) -> Optional[Member]:
        member = self._members.get(member_id)
        return member.model_copy(deep=True) if member else None

    async def get_all_members(self) -> list[Member]:
        return [m.model_copy(deep=True) for m in self._members.values()]

    async def save_member(self, member: Member) -> None:
        self._members[member.id] = member.model_copy(deep=True)
        self._notify()

    async def delete_member(self, member_id: str) -> None:
        if self._members.pop(member_id, None) is not None:
            self._notify()

    async def get_relationship(self, relationship_id: str) -> Optional[Relationship]:
        rel = self._relationships.get(relationship_id)
        return rel.model_copy(deep=True) if rel else None

    async def get_all_relationships(self) -> list[Relationship]:
        return [r.model_copy(deep=True) for r in self._relationships.values()]

    async def get_relationships_for_member(self, member_id: str) -> list[Relationship]:
        ids = self._by_member.get(member_id, set())
        return [
            self._relationships[rel_id].model_copy(deep=True)
            for rel_id in sorted(ids, key=lambda i: self._relationships[i].created_at)
        ]

    async def save_relationship(self, relationship: Relationship) -> None:
        previous = self._relationships.get(relationship.id)
        if previous is not None:
            self._unindex(previous)
        stored = relationship.model_copy(deep=True)
        self._relationships[stored.id] = stored
        self._index(stored)
        self._notify()

    async def delete_relationship(self, relationship_id: str) -> None:
        rel = self._relationships.pop(relationship_id, None)
        if rel is not None:
            self._unindex(rel)
            self._notify()

    async def import_tree(self, data: FamilyTreeExport, clear_existing: bool = False) -> None:
        if clear_existing:
            self._reset()
        for member in data.members:
            self._members[member.id] = member.model_copy(deep=True)
        for rel in data.relationships:
            previous = self._relationships.get(rel.id)
            if previous is not None:
                self._unindex(previous)
            stored = rel.model_copy(deep=True)
            self._relationships[stored.id] = stored
            self._index(stored)
        self._notify()

    async def clear_all(self) -> None:
        self._reset()
        self._notify()

    def _reset(self) -> None:
        self._members.clear()
        self._relationships.clear()
        self._by_member.clear()
