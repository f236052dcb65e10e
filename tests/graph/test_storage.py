"""Storage backend tests, run against both implementations."""

import pytest

from ancestree.graph.family.graph import FamilyGraph
from ancestree.graph.models import FamilyTreeExport
from ancestree.graph.storage.memory import InMemoryStorage
from ancestree.graph.storage.sqlite import SQLiteStorage
from ancestree.models import RelationshipType, create_member, create_relationship


@pytest.fixture(params=["memory", "sqlite"])
def backend(request, tmp_path):
    """Each storage implementation in turn."""
    if request.param == "memory":
        return InMemoryStorage()
    return SQLiteStorage(db_path=str(tmp_path / "tree.db"))


class TestMemberStorage:
    """Member CRUD."""

    async def test_save_and_get(self, backend):
        member = create_member("Ramesh", date_of_birth="1950-04-02", notes="eldest")
        await backend.save_member(member)

        stored = await backend.get_member(member.id)
        assert stored is not None
        assert stored.name == "Ramesh"
        assert stored.date_of_birth == "1950-04-02"
        assert stored.notes == "eldest"
        assert stored.created_at == member.created_at

    async def test_save_replaces(self, backend):
        member = create_member("Ramesh")
        await backend.save_member(member)
        member.name = "Ramesh K"
        await backend.save_member(member)

        assert [m.name for m in await backend.get_all_members()] == ["Ramesh K"]

    async def test_delete_member_leaves_relationships(self, backend):
        """Cascade is the engine's job, not storage's."""
        a, b = create_member("A"), create_member("B")
        await backend.save_member(a)
        await backend.save_member(b)
        rel = create_relationship("sibling", a.id, b.id)
        await backend.save_relationship(rel)

        await backend.delete_member(a.id)

        assert await backend.get_member(a.id) is None
        assert await backend.get_relationship(rel.id) is not None

    async def test_missing(self, backend):
        assert await backend.get_member("ghost") is None
        assert await backend.get_relationship("ghost") is None


class TestRelationshipStorage:
    """Relationship CRUD and per-member lookups."""

    async def test_save_and_get(self, backend):
        rel = create_relationship("spouse", "a", "b", marriage_date="1980-05-05")
        await backend.save_relationship(rel)

        stored = await backend.get_relationship(rel.id)
        assert stored.type == RelationshipType.SPOUSE
        assert stored.marriage_date == "1980-05-05"
        assert stored.divorce_date is None

    async def test_for_member_either_end(self, backend):
        r1 = create_relationship("parent-child", "p", "c")
        r2 = create_relationship("sibling", "c", "s")
        r3 = create_relationship("spouse", "x", "y")
        for rel in (r1, r2, r3):
            await backend.save_relationship(rel)

        ids = {r.id for r in await backend.get_relationships_for_member("c")}
        assert ids == {r1.id, r2.id}

    async def test_delete(self, backend):
        rel = create_relationship("sibling", "a", "b")
        await backend.save_relationship(rel)
        await backend.delete_relationship(rel.id)

        assert await backend.get_relationship(rel.id) is None
        assert await backend.get_relationships_for_member("a") == []

    async def test_resave_moves_index(self, backend):
        """Changing endpoints on re-save updates per-member lookups."""
        rel = create_relationship("sibling", "a", "b")
        await backend.save_relationship(rel)
        rel.person2_id = "c"
        await backend.save_relationship(rel)

        assert await backend.get_relationships_for_member("b") == []
        assert [r.id for r in await backend.get_relationships_for_member("c")] == [rel.id]


class TestBulkStorage:
    """Import, export and clear."""

    async def test_round_trip(self, backend):
        a, b = create_member("A"), create_member("B")
        rel = create_relationship("parent-child", a.id, b.id)
        await backend.import_tree(FamilyTreeExport(members=[a, b], relationships=[rel]))

        export = await backend.export_tree("2.0.0")
        assert export.version == "2.0.0"
        assert {m.id for m in export.members} == {a.id, b.id}
        assert [r.id for r in export.relationships] == [rel.id]

    async def test_import_clear_existing(self, backend):
        await backend.save_member(create_member("Old"))
        new = create_member("New")
        await backend.import_tree(FamilyTreeExport(members=[new]), clear_existing=True)
        assert [m.name for m in await backend.get_all_members()] == ["New"]

    async def test_clear_all(self, backend):
        await backend.save_member(create_member("A"))
        await backend.save_relationship(create_relationship("sibling", "a", "b"))
        await backend.clear_all()
        assert await backend.get_all_members() == []
        assert await backend.get_all_relationships() == []


class TestStorageNotifications:
    """Writes notify subscribers."""

    async def test_on_change(self, backend):
        calls = []
        unsubscribe = backend.on_change(lambda: calls.append(1))

        member = create_member("A")
        await backend.save_member(member)
        await backend.delete_member(member.id)
        assert len(calls) == 2

        unsubscribe()
        unsubscribe()
        await backend.save_member(create_member("B"))
        assert len(calls) == 2


class TestSQLiteEngine:
    """The engine behaves the same over SQLite."""

    async def test_spouse_propagation(self, sqlite_storage):
        graph = FamilyGraph(sqlite_storage)
        a = await graph.add_member("A", date_of_birth="1950-01-01")
        b = await graph.add_member("B", date_of_birth="1952-01-01")
        c = await graph.add_member("C", date_of_birth="1980-01-01")
        await graph.add_parent_child(a.id, c.id)

        await graph.add_spouse(a.id, b.id)

        assert {m.name for m in await graph.get_parents(c.id)} == {"A", "B"}

    async def test_persists_across_instances(self, tmp_path):
        path = str(tmp_path / "tree.db")
        first = FamilyGraph(SQLiteStorage(db_path=path))
        p = await first.add_member("P")
        c = await first.add_member("C")
        await first.add_parent_child(p.id, c.id)

        second = FamilyGraph(SQLiteStorage(db_path=path))
        assert {m.name for m in await second.get_ancestors(c.id)} == {"P"}
