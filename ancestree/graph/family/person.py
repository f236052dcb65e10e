"""Member operations for FamilyGraph."""

from datetime import datetime, timezone
from typing import Optional

from ancestree.errors import MemberNotFoundError, ValidationError
from ancestree.graph.storage.base import FamilyStorage
from ancestree.logging import get_logger
from ancestree.models import Member, create_member
from ancestree.validation import validate_member_dates, validate_name

logger = get_logger(__name__)

OPTIONAL_FIELDS = {"date_of_birth", "place_of_birth", "date_of_death", "notes"}
UPDATABLE_FIELDS = {"name"} | OPTIONAL_FIELDS


def _reject_unknown(fields: dict, allowed: set[str], action: str) -> None:
    unknown = set(fields) - allowed
    if unknown:
        raise ValidationError(f"Cannot {action} field(s): {', '.join(sorted(unknown))}")


class PersonOperations:
    """CRUD operations for members."""

    def __init__(self, storage: FamilyStorage):
        self.storage = storage

    async def _require(self, member_id: str) -> Member:
        member = await self.storage.get_member(member_id)
        if member is None:
            raise MemberNotFoundError(member_id)
        return member

    async def add(self, name: str, **fields: Optional[str]) -> Member:
        """Validate, create and persist a member.

        Optional fields: date_of_birth, place_of_birth, date_of_death, notes.
        """
        _reject_unknown(fields, OPTIONAL_FIELDS, "set")
        name = validate_name(name)
        date_of_birth = fields.get("date_of_birth")
        date_of_death = fields.get("date_of_death")
        validate_member_dates({"date_of_birth": date_of_birth, "date_of_death": date_of_death})

        member = create_member(
            name=name,
            date_of_birth=date_of_birth or None,
            place_of_birth=fields.get("place_of_birth"),
            date_of_death=date_of_death or None,
            notes=fields.get("notes"),
        )
        await self.storage.save_member(member)
        logger.info("member.added", member_id=member.id)
        return member

    async def get(self, member_id: str) -> Optional[Member]:
        return await self.storage.get_member(member_id)

    async def get_all(self) -> list[Member]:
        return await self.storage.get_all_members()

    async def update(self, member_id: str, **changes) -> Member:
        """Apply a partial update.

        Any field passed replaces the stored value, including None, which
        clears it. Chronology is checked on the merged record.
        """
        _reject_unknown(changes, UPDATABLE_FIELDS, "update")

        existing = await self._require(member_id)

        if "name" in changes:
            changes["name"] = validate_name(changes["name"])
        for key in ("date_of_birth", "date_of_death"):
            if key in changes and changes[key] == "":
                changes[key] = None

        merged = existing.model_copy(update=changes)
        validate_member_dates(merged)
        merged.updated_at = max(datetime.now(timezone.utc), existing.updated_at)

        await self.storage.save_member(merged)
        logger.info("member.updated", member_id=member_id, fields=sorted(changes))
        return merged

    async def delete(self, member_id: str) -> int:
        """Delete a member and every relationship touching it.

        Returns the number of relationships removed.
        """
        await self._require(member_id)

        relationships = await self.storage.get_relationships_for_member(member_id)
        for rel in relationships:
            await self.storage.delete_relationship(rel.id)
        await self.storage.delete_member(member_id)

        logger.info("member.deleted", member_id=member_id, cascaded=len(relationships))
        return len(relationships)
