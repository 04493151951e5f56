"""Roles and the pure predicates derived from a person's role set."""

from collections.abc import Iterable
from enum import StrEnum


class Role(StrEnum):
    """Capability tags a person can hold. Persisted by name."""

    SENIOR = "ROLE_SENIOR"
    FAMILY = "ROLE_FAMILY"
    ADMIN = "ROLE_ADMIN"


def is_senior(roles: Iterable[Role]) -> bool:
    return Role.SENIOR in set(roles)


def is_family_member(roles: Iterable[Role]) -> bool:
    return Role.FAMILY in set(roles)


def full_name(first_name: str, last_name: str) -> str:
    """Join names with a single space, even when either side is empty."""
    return first_name + " " + last_name


def parse_role(value: str | Role) -> Role:
    """Accept ``Role`` members, stored names (``ROLE_SENIOR``) or short names (``senior``)."""
    if isinstance(value, Role):
        return value
    name = value.strip().upper()
    if not name.startswith("ROLE_"):
        name = f"ROLE_{name}"
    try:
        return Role(name)
    except ValueError:
        raise ValueError(f"Unknown role: {value!r}") from None
