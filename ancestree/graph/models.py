"""Shared data models for graph operations."""

from dataclasses import dataclass, field
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field

from ancestree.config import settings
from ancestree.models import Member, Relationship, _now


@dataclass
class FamilyTree:
    """One-hop neighbourhood of a member."""
    person: Member
    parents: list[Member] = field(default_factory=list)
    spouses: list[Member] = field(default_factory=list)
    children: list[Member] = field(default_factory=list)
    siblings: list[Member] = field(default_factory=list)


class FamilyTreeExport(BaseModel):
    """Whole-tree snapshot handed to and from storage."""

    model_config = ConfigDict(populate_by_name=True)

    version: str = Field(default_factory=lambda: settings.engine.export_version)
    exported_at: datetime = Field(default_factory=_now, alias="exportedAt")
    members: list[Member] = Field(default_factory=list)
    relationships: list[Relationship] = Field(default_factory=list)

    def to_dict(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)

    @classmethod
    def from_dict(cls, data: dict) -> "FamilyTreeExport":
        """Build from the camelCase dict shape produced by to_dict."""
        return cls.model_validate(data)
