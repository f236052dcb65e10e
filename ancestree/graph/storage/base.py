"""Storage contract consumed by the family graph engine."""

from abc import ABC, abstractmethod
from typing import Callable, Optional

from ancestree.graph.models import FamilyTreeExport
from ancestree.models import Member, Relationship

ChangeCallback = Callable[[], None]
Unsubscribe = Callable[[], None]


class FamilyStorage(ABC):
    """
    Async CRUD by id for members and relationships, plus change notification.

    Implementations own the canonical records. They do not enforce graph
    invariants; that is the engine's job. Reads must return detached copies.
    """

    def __init__(self):
        self._listeners: list[ChangeCallback] = []

    # ─────────────────────────────────────────
    # Members
    # ─────────────────────────────────────────

    @abstractmethod
    async def get_member(self, member_id: str) -> Optional[Member]: ...

    @abstractmethod
    async def get_all_members(self) -> list[Member]: ...

    @abstractmethod
    async def save_member(self, member: Member) -> None:
        """Insert or replace a member by id."""

    @abstractmethod
    async def delete_member(self, member_id: str) -> None:
        """Remove the member record only; relationships are left alone."""

    # ─────────────────────────────────────────
    # Relationships
    # ─────────────────────────────────────────

    @abstractmethod
    async def get_relationship(self, relationship_id: str) -> Optional[Relationship]: ...

    @abstractmethod
    async def get_all_relationships(self) -> list[Relationship]: ...

    @abstractmethod
    async def get_relationships_for_member(self, member_id: str) -> list[Relationship]:
        """Relationships where the member is person1 or person2."""

    @abstractmethod
    async def save_relationship(self, relationship: Relationship) -> None: ...

    @abstractmethod
    async def delete_relationship(self, relationship_id: str) -> None: ...

    # ─────────────────────────────────────────
    # Bulk
    # ─────────────────────────────────────────

    @abstractmethod
    async def import_tree(self, data: FamilyTreeExport, clear_existing: bool = False) -> None: ...

    @abstractmethod
    async def clear_all(self) -> None: ...

    async def export_tree(self, version: Optional[str] = None) -> FamilyTreeExport:
        """Snapshot everything currently stored."""
        export = FamilyTreeExport(
            members=await self.get_all_members(),
            relationships=await self.get_all_relationships(),
        )
        if version:
            export.version = version
        return export

    # ─────────────────────────────────────────
    # Change notification
    # ─────────────────────────────────────────

    def on_change(self, callback: ChangeCallback) -> Unsubscribe:
        """Subscribe to writes. Returns a function that unsubscribes."""
        self._listeners.append(callback)

        def unsubscribe() -> None:
            if callback in self._listeners:
                self._listeners.remove(callback)

        return unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener()
