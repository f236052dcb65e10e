"""Test family graph facade: members, bulk operations and notifications."""

import pytest

from ancestree.errors import (
    AncestreeError,
    ChronologyError,
    InvalidDateError,
    MemberNotFoundError,
    ValidationError,
)
from ancestree.graph.family.graph import FamilyGraph
from ancestree.graph.models import FamilyTreeExport
from ancestree.graph.storage.memory import InMemoryStorage


class TestAddMember:
    """Tests for member creation."""

    async def test_add_and_get(self, graph):
        member = await graph.add_member("Ramesh", date_of_birth="1950-04-02", place_of_birth="Hyderabad")
        stored = await graph.get_member(member.id)
        assert stored is not None
        assert stored.name == "Ramesh"
        assert stored.place_of_birth == "Hyderabad"

    async def test_name_trimmed(self, graph):
        member = await graph.add_member("  Padma  ")
        assert member.name == "Padma"

    async def test_blank_name(self, graph):
        with pytest.raises(ValidationError):
            await graph.add_member("  ")
        assert await graph.get_all_members() == []

    async def test_death_before_birth(self, graph):
        with pytest.raises(ChronologyError):
            await graph.add_member("X", date_of_birth="2020-01-01", date_of_death="2019-01-01")

    async def test_malformed_date(self, graph):
        with pytest.raises(InvalidDateError):
            await graph.add_member("X", date_of_birth="01-01-2020")

    async def test_get_missing(self, graph):
        assert await graph.get_member("ghost") is None

    async def test_unknown_field(self, graph):
        """Unknown fields are rejected the same way update_member rejects them."""
        with pytest.raises(ValidationError, match="nickname"):
            await graph.add_member("Asha", nickname="Ash")
        assert await graph.get_all_members() == []


class TestUpdateMember:
    """Tests for partial updates."""

    async def test_partial_update(self, graph):
        member = await graph.add_member("Asha", date_of_birth="1990-01-01")
        updated = await graph.update_member(member.id, place_of_birth="Mumbai")
        assert updated.place_of_birth == "Mumbai"
        assert updated.date_of_birth == "1990-01-01"
        assert updated.created_at == member.created_at
        assert updated.updated_at >= member.updated_at

    async def test_merged_chronology(self, graph):
        """Death-only update is checked against the stored birth date."""
        member = await graph.add_member("Asha", date_of_birth="2000-01-01")
        with pytest.raises(ChronologyError):
            await graph.update_member(member.id, date_of_death="1990-01-01")
        stored = await graph.get_member(member.id)
        assert stored.date_of_death is None

    async def test_explicit_none_clears(self, graph):
        member = await graph.add_member("Asha", notes="likes tea")
        updated = await graph.update_member(member.id, notes=None)
        assert updated.notes is None

    async def test_blank_name_rejected(self, graph):
        member = await graph.add_member("Asha")
        with pytest.raises(ValidationError):
            await graph.update_member(member.id, name="   ")

    async def test_name_trimmed(self, graph):
        member = await graph.add_member("Asha")
        updated = await graph.update_member(member.id, name=" Asha Rao ")
        assert updated.name == "Asha Rao"

    async def test_immutable_fields(self, graph):
        member = await graph.add_member("Asha")
        with pytest.raises(ValidationError):
            await graph.update_member(member.id, id="other")

    async def test_unknown_member(self, graph):
        with pytest.raises(MemberNotFoundError):
            await graph.update_member("ghost", notes="x")


class TestDeleteMember:
    """Deleting a member cascades to its relationships."""

    async def test_cascade(self, graph, family):
        suresh = family["Suresh"]
        await graph.delete_member(suresh.id)

        assert await graph.get_member(suresh.id) is None
        for rel in await graph.get_all_relationships():
            assert not rel.involves(suresh.id)

    async def test_queries_never_return_deleted(self, graph, family):
        suresh = family["Suresh"]
        await graph.delete_member(suresh.id)

        for member in await graph.get_all_members():
            for query in (graph.get_parents, graph.get_children, graph.get_spouses,
                          graph.get_siblings, graph.get_ancestors, graph.get_descendants):
                assert suresh.id not in {m.id for m in await query(member.id)}

        assert {m.name for m in await graph.get_parents(family["Kiran"].id)} == {"Anita"}

    async def test_delete_missing(self, graph):
        with pytest.raises(MemberNotFoundError):
            await graph.delete_member("ghost")


class TestBulkOperations:
    """Tests for export/import delegation."""

    async def test_export_and_import(self, graph, family):
        export = await graph.export_tree()
        assert export.version == "1.0.0"
        assert len(export.members) == 7
        assert len(export.relationships) == 10

        other = FamilyGraph(InMemoryStorage())
        await other.import_tree(export)

        assert len(await other.get_all_members()) == 7
        assert {m.name for m in await other.get_ancestors(family["Kiran"].id)} == {
            "Suresh", "Anita", "Ramesh", "Padma",
        }

    async def test_import_dict(self, graph, family):
        data = (await graph.export_tree()).to_dict()
        assert "exportedAt" in data

        other = FamilyGraph(InMemoryStorage())
        await other.import_tree(data)
        assert len(await other.get_all_relationships()) == 10

    async def test_import_clear_existing(self, graph, family):
        export = FamilyTreeExport(members=[], relationships=[])
        await graph.import_tree(export, clear_existing=True)
        assert await graph.get_all_members() == []
        assert await graph.get_all_relationships() == []

    async def test_import_merges_by_default(self, graph):
        await graph.add_member("Existing")
        data = {
            "version": "1.0.0",
            "members": [{"id": "m1", "name": "Imported"}],
            "relationships": [],
        }
        await graph.import_tree(data)
        assert {m.name for m in await graph.get_all_members()} == {"Existing", "Imported"}

    async def test_import_invalid(self, graph):
        data = {
            "version": "1.0.0",
            "members": [{"id": "m1", "name": "A"}],
            "relationships": [{"id": "r1", "type": "spouse", "person1Id": "m1", "person2Id": "m9"}],
        }
        with pytest.raises(ValidationError) as exc:
            await graph.import_tree(data)
        assert any("m9" in e for e in exc.value.errors)
        assert await graph.get_all_members() == []

    async def test_import_impossible_date(self, graph):
        """A well-shaped but non-existent date is not stored."""
        data = {
            "members": [{"id": "m1", "name": "A", "dateOfBirth": "2023-02-30"}],
            "relationships": [],
        }
        with pytest.raises(ValidationError) as exc:
            await graph.import_tree(data)
        assert any("2023-02-30" in e for e in exc.value.errors)
        assert await graph.get_member("m1") is None

    @pytest.mark.parametrize("member", [
        {"id": "m1", "name": "A", "notes": 5},
        {"id": "m1", "name": "A", "createdAt": "not a timestamp"},
    ])
    async def test_import_bad_field_types(self, graph, member):
        """Field type problems surface as engine errors, not pydantic ones."""
        with pytest.raises(AncestreeError) as exc:
            await graph.import_tree({"members": [member], "relationships": []})
        assert isinstance(exc.value, ValidationError)
        assert exc.value.errors
        assert await graph.get_all_members() == []

    async def test_import_trims_names(self, graph):
        await graph.import_tree({"members": [{"id": "m1", "name": "  Padma  "}], "relationships": []})
        stored = await graph.get_member("m1")
        assert stored.name == "Padma"

    async def test_clear_all(self, graph, family):
        await graph.clear_all()
        assert await graph.get_all_members() == []


class TestChangeNotification:
    """Tests for on_change subscriptions."""

    async def test_notified_on_writes(self, graph):
        calls = []
        unsubscribe = graph.on_change(lambda: calls.append(1))

        a = await graph.add_member("A")
        b = await graph.add_member("B")
        await graph.add_spouse(a.id, b.id)
        assert len(calls) == 3

        unsubscribe()
        await graph.add_member("C")
        assert len(calls) == 3

    async def test_reads_do_not_notify(self, graph, family):
        calls = []
        graph.on_change(lambda: calls.append(1))
        await graph.get_ancestors(family["Kiran"].id)
        await graph.get_family_tree(family["Kiran"].id)
        assert calls == []
