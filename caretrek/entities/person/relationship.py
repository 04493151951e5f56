"""How a family member is related to a senior they follow."""

from enum import StrEnum


class Relationship(StrEnum):
    CHILD = "child"
    SPOUSE = "spouse"
    SIBLING = "sibling"
    CAREGIVER = "caregiver"
    OTHER = "other"


def parse_relationship(value: str | Relationship) -> Relationship:
    if isinstance(value, Relationship):
        return value
    try:
        return Relationship(value.strip().lower())
    except ValueError:
        raise ValueError(f"Unknown relationship: {value!r}") from None
