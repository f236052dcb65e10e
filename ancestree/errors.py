"""Error taxonomy for the family graph engine.

Every error is raised at the point of detection, before any write happens.
The facade never catches or rewraps them.
"""

from typing import Optional


class AncestreeError(Exception):
    """Base class for all engine errors."""


class ValidationError(AncestreeError):
    """Missing or malformed input."""

    def __init__(self, message: str, errors: Optional[list[str]] = None):
        super().__init__(message)
        self.errors = errors or [message]


class InvalidDateError(ValidationError):
    """A date field is not a well-formed YYYY-MM-DD calendar date."""


InvalidDate = InvalidDateError


class ChronologyError(ValidationError):
    """Dates are individually valid but out of order."""


class SelfRelationshipError(ValidationError):
    """Both ends of a relationship are the same member."""


class DuplicateRelationshipError(ValidationError):
    """An edge of the same kind already connects the pair."""


class CycleError(ValidationError):
    """A parent-child edge would close a loop in the ancestry."""


class NotFoundError(AncestreeError):
    """A referenced record does not exist."""

    kind = "record"

    def __init__(self, record_id: str):
        super().__init__(f"{self.kind.capitalize()} with id '{record_id}' not found")
        self.record_id = record_id


class MemberNotFoundError(NotFoundError):
    kind = "member"


class RelationshipNotFoundError(NotFoundError):
    kind = "relationship"
