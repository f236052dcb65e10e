"""Family tree queries."""

from typing import Optional

from ancestree.errors import MemberNotFoundError
from ancestree.graph.family.snapshot import FamilySnapshot
from ancestree.graph.models import FamilyTree
from ancestree.graph.storage.base import FamilyStorage
from ancestree.models import Member


class FamilyQueries:
    """Traversal queries derived from the stored edge set.

    Every call reads storage afresh unless the caller passes a snapshot.
    """

    def __init__(self, storage: FamilyStorage):
        self.storage = storage

    async def _snapshot(self, snapshot: Optional[FamilySnapshot]) -> FamilySnapshot:
        return snapshot if snapshot is not None else await FamilySnapshot.load(self.storage)

    async def _neighbourhood(self, member_id: str) -> FamilySnapshot:
        """Snapshot of just the member's incident edges and their endpoints."""
        relationships = await self.storage.get_relationships_for_member(member_id)
        member_ids = {member_id}
        for rel in relationships:
            member_ids.update((rel.person1_id, rel.person2_id))
        members = [m for m in [await self.storage.get_member(mid) for mid in member_ids] if m]
        return FamilySnapshot(members, relationships)

    async def get_parents(self, member_id: str, snapshot: Optional[FamilySnapshot] = None) -> list[Member]:
        """Get parents of a member."""
        view = snapshot if snapshot is not None else await self._neighbourhood(member_id)
        return view.resolve(view.parent_ids(member_id))

    async def get_children(self, member_id: str, snapshot: Optional[FamilySnapshot] = None) -> list[Member]:
        """Get children of a member."""
        view = snapshot if snapshot is not None else await self._neighbourhood(member_id)
        return view.resolve(view.child_ids(member_id))

    async def get_spouses(self, member_id: str, snapshot: Optional[FamilySnapshot] = None) -> list[Member]:
        """Get spouse(s) of a member, regardless of stored order."""
        view = snapshot if snapshot is not None else await self._neighbourhood(member_id)
        return view.resolve(view.spouse_ids(member_id))

    async def get_siblings(self, member_id: str, snapshot: Optional[FamilySnapshot] = None) -> list[Member]:
        """Get declared siblings plus half/full siblings through shared parents."""
        view = await self._snapshot(snapshot)
        return view.resolve(view.sibling_ids(member_id))

    async def get_ancestors(self, member_id: str, snapshot: Optional[FamilySnapshot] = None) -> list[Member]:
        """Get all ancestors (parents, grandparents, ...). Order is not sorted."""
        view = await self._snapshot(snapshot)
        return view.resolve(view.ancestor_ids(member_id))

    async def get_descendants(self, member_id: str, snapshot: Optional[FamilySnapshot] = None) -> list[Member]:
        """Get all descendants (children, grandchildren, ...). Order is not sorted."""
        view = await self._snapshot(snapshot)
        return view.resolve(view.descendant_ids(member_id))

    async def get_family_tree(self, member_id: str) -> FamilyTree:
        """Get the one-hop family around a member."""
        view = await FamilySnapshot.load(self.storage)
        person = view.member(member_id)
        if person is None:
            raise MemberNotFoundError(member_id)

        return FamilyTree(
            person=person.model_copy(deep=True),
            parents=view.resolve(view.parent_ids(member_id)),
            spouses=view.resolve(view.spouse_ids(member_id)),
            children=view.resolve(view.child_ids(member_id)),
            siblings=view.resolve(view.sibling_ids(member_id)),
        )
