"""Validation for member and relationship fields.

Everything here is pure: functions either return the cleaned value or raise
one of the errors from ``ancestree.errors``.
"""

import re
from datetime import date
from typing import Any, Mapping, Optional, Union

from ancestree.errors import ChronologyError, InvalidDateError, ValidationError
from ancestree.models import Member, RelationshipType

ISO_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")

RELATIONSHIP_TYPES = {kind.value for kind in RelationshipType}


def _field(record: Union[Member, Mapping[str, Any]], key: str) -> Any:
    if isinstance(record, Mapping):
        return record.get(key)
    return getattr(record, key, None)


def validate_date(value: Any, field: str = "date") -> date:
    """Parse a YYYY-MM-DD string into a date."""
    if not isinstance(value, str) or not ISO_DATE_PATTERN.match(value):
        raise InvalidDateError(f"{field} must be in YYYY-MM-DD format")
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise InvalidDateError(f"{field} is not a valid calendar date: {value}") from None


def validate_optional_date(value: Any, field: str = "date") -> Optional[date]:
    if value is None or value == "":
        return None
    return validate_date(value, field)


def validate_name(value: Any, field: str = "name") -> str:
    """Trim a display name and reject blanks."""
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{field} is required")
    return value.strip()


def validate_member_dates(member: Union[Member, Mapping[str, Any]]) -> None:
    """Check birth/death dates are well-formed and in order."""
    birth = validate_optional_date(_field(member, "date_of_birth"), "date_of_birth")
    death = validate_optional_date(_field(member, "date_of_death"), "date_of_death")

    if birth and death and death < birth:
        raise ChronologyError("date_of_death cannot be before date_of_birth")


def validate_relationship_dates(
    kind: Union[RelationshipType, str],
    marriage_date: Optional[str] = None,
    divorce_date: Optional[str] = None,
) -> None:
    """Check marriage/divorce metadata for a proposed relationship."""
    kind = RelationshipType(kind)
    if kind != RelationshipType.SPOUSE and (marriage_date or divorce_date):
        raise ValidationError("Marriage and divorce dates only apply to spouse relationships")

    marriage = validate_optional_date(marriage_date, "marriage_date")
    divorce = validate_optional_date(divorce_date, "divorce_date")

    if marriage and divorce and divorce < marriage:
        raise ChronologyError("divorce_date cannot be before marriage_date")


def validate_parent_child_dates(parent: Member, child: Member) -> None:
    """Parent must be born strictly before child when both dates are known."""
    parent_birth = validate_optional_date(parent.date_of_birth, "date_of_birth")
    child_birth = validate_optional_date(child.date_of_birth, "date_of_birth")

    if parent_birth and child_birth and parent_birth >= child_birth:
        raise ChronologyError(
            f"Parent '{parent.name}' must be born before child '{child.name}'"
        )


def _check_export_dates(record: Mapping[str, Any], prefix: str, keys: tuple[str, ...],
                        errors: list[str]) -> bool:
    valid = True
    for key in keys:
        value = record.get(key)
        if value is None:
            continue
        try:
            validate_date(value, f"{prefix}.{key}")
        except InvalidDateError as e:
            errors.append(str(e))
            valid = False
    return valid


def _check_export_member(member: Any, index: int, errors: list[str]) -> Optional[str]:
    prefix = f"members[{index}]"
    if not isinstance(member, Mapping):
        errors.append(f"{prefix}: must be an object")
        return None

    member_id = member.get("id")
    valid = True
    if not isinstance(member_id, str) or not member_id.strip():
        errors.append(f"{prefix}.id: required")
        valid = False
    if not isinstance(member.get("name"), str) or not member["name"].strip():
        errors.append(f"{prefix}.name: required")
        valid = False
    if not _check_export_dates(member, prefix, ("dateOfBirth", "dateOfDeath"), errors):
        valid = False
    return member_id if valid else None


def _check_export_relationship(rel: Any, index: int, member_ids: set[str], errors: list[str]) -> Optional[str]:
    prefix = f"relationships[{index}]"
    if not isinstance(rel, Mapping):
        errors.append(f"{prefix}: must be an object")
        return None

    rel_id = rel.get("id")
    valid = True
    if not isinstance(rel_id, str) or not rel_id.strip():
        errors.append(f"{prefix}.id: required")
        valid = False
    if rel.get("type") not in RELATIONSHIP_TYPES:
        errors.append(f"{prefix}.type: must be one of {', '.join(sorted(RELATIONSHIP_TYPES))}")
        valid = False
    for key in ("person1Id", "person2Id"):
        if rel.get(key) not in member_ids:
            errors.append(f"{prefix}.{key}: references unknown member '{rel.get(key)}'")
            valid = False
    if not _check_export_dates(rel, prefix, ("marriageDate", "divorceDate"), errors):
        valid = False
    return rel_id if valid else None


def validate_tree_export(data: Any) -> None:
    """Structural check of an import snapshot.

    Collects every problem and raises a single ValidationError listing them.
    """
    if not isinstance(data, Mapping):
        raise ValidationError("Tree data must be an object")

    errors: list[str] = []
    members = data.get("members")
    relationships = data.get("relationships")
    if not isinstance(members, list):
        errors.append("members: required and must be a list")
    if not isinstance(relationships, list):
        errors.append("relationships: required and must be a list")
    if errors:
        raise ValidationError("Invalid tree data", errors)

    member_ids: set[str] = set()
    for i, member in enumerate(members):
        member_id = _check_export_member(member, i, errors)
        if member_id is None:
            continue
        if member_id in member_ids:
            errors.append(f"members[{i}].id: duplicate id '{member_id}'")
        member_ids.add(member_id)

    rel_ids: set[str] = set()
    for i, rel in enumerate(relationships):
        rel_id = _check_export_relationship(rel, i, member_ids, errors)
        if rel_id is None:
            continue
        if rel_id in rel_ids:
            errors.append(f"relationships[{i}].id: duplicate id '{rel_id}'")
        rel_ids.add(rel_id)

    if errors:
        raise ValidationError(f"Invalid tree data ({len(errors)} problems)", errors)
