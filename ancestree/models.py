"""Data models for the family tree."""

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return str(uuid.uuid4())


class RelationshipType(str, Enum):
    """Types of family relationships."""
    PARENT_CHILD = "parent-child"
    SPOUSE = "spouse"
    SIBLING = "sibling"


class Member(BaseModel):
    """Person node in the family graph."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(default_factory=_new_id)
    name: str
    date_of_birth: Optional[str] = Field(default=None, alias="dateOfBirth")  # YYYY-MM-DD
    place_of_birth: Optional[str] = Field(default=None, alias="placeOfBirth")
    date_of_death: Optional[str] = Field(default=None, alias="dateOfDeath")
    notes: Optional[str] = None
    created_at: datetime = Field(default_factory=_now, alias="createdAt")
    updated_at: datetime = Field(default_factory=_now, alias="updatedAt")

    def to_dict(self) -> dict:
        """Convert to the camelCase shape used in tree exports."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class Relationship(BaseModel):
    """Typed edge between two members.

    For parent-child, person1 is the parent and person2 the child.
    Spouse and sibling edges are unordered.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(default_factory=_new_id)
    type: RelationshipType
    person1_id: str = Field(alias="person1Id")
    person2_id: str = Field(alias="person2Id")
    marriage_date: Optional[str] = Field(default=None, alias="marriageDate")
    divorce_date: Optional[str] = Field(default=None, alias="divorceDate")
    created_at: datetime = Field(default_factory=_now, alias="createdAt")
    updated_at: datetime = Field(default_factory=_now, alias="updatedAt")

    @property
    def is_directed(self) -> bool:
        return self.type == RelationshipType.PARENT_CHILD

    def involves(self, member_id: str) -> bool:
        return member_id in (self.person1_id, self.person2_id)

    def other(self, member_id: str) -> str:
        """Return the id at the opposite end from member_id."""
        return self.person2_id if self.person1_id == member_id else self.person1_id

    def connects(self, kind: RelationshipType, person1_id: str, person2_id: str) -> bool:
        """Check whether this edge is of `kind` between the pair.

        Order matters for parent-child only.
        """
        if self.type != kind:
            return False
        if self.person1_id == person1_id and self.person2_id == person2_id:
            return True
        if self.is_directed:
            return False
        return self.person1_id == person2_id and self.person2_id == person1_id

    def to_dict(self) -> dict:
        """Convert to the camelCase shape used in tree exports."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


def create_member(
    name: str,
    date_of_birth: Optional[str] = None,
    place_of_birth: Optional[str] = None,
    date_of_death: Optional[str] = None,
    notes: Optional[str] = None,
) -> Member:
    """Build a new member with a fresh id and matching timestamps."""
    now = _now()
    return Member(
        name=name,
        date_of_birth=date_of_birth,
        place_of_birth=place_of_birth,
        date_of_death=date_of_death,
        notes=notes,
        created_at=now,
        updated_at=now,
    )


def create_relationship(
    kind: RelationshipType,
    person1_id: str,
    person2_id: str,
    marriage_date: Optional[str] = None,
    divorce_date: Optional[str] = None,
) -> Relationship:
    """Build a new relationship with a fresh id and matching timestamps."""
    now = _now()
    return Relationship(
        type=RelationshipType(kind),
        person1_id=person1_id,
        person2_id=person2_id,
        marriage_date=marriage_date,
        divorce_date=divorce_date,
        created_at=now,
        updated_at=now,
    )
