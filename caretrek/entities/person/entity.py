"""Person domain entity."""

from typing import Any

from pydantic import Field

from caretrek.entities._base import Entity
from caretrek.entities.person import roles as role_rules
from caretrek.entities.person.roles import Role


class Person(Entity):
    """A CareTrek user: a senior, a family member, or both.

    Senior-specific fields live on every record regardless of role. The
    role set decides how the record is treated; see ``is_senior`` and
    ``is_family_member``.
    """

    email: str = Field(description="Login email, unique across persons")
    password: str = Field(repr=False, description="bcrypt hash of the password")
    first_name: str = Field(description="Person's first name")
    last_name: str = Field(description="Person's last name")
    phone_number: str | None = Field(
        default=None, description="Phone number, unique when present"
    )
    profile_image_url: str | None = Field(
        default=None, description="Reference to the profile image"
    )
    active: bool = Field(default=True, description="Whether the account is active")
    roles: set[Role] = Field(default_factory=set, description="Role tags")

    senior_code: str | None = Field(
        default=None, description="Short code a senior shares for linking"
    )
    emergency_contact: str | None = Field(default=None)
    medical_conditions: str | None = Field(default=None)
    medications: str | None = Field(default=None)

    @property
    def full_name(self) -> str:
        return role_rules.full_name(self.first_name, self.last_name)

    def is_senior(self) -> bool:
        return role_rules.is_senior(self.roles)

    def is_family_member(self) -> bool:
        return role_rules.is_family_member(self.roles)

    def _business_key(self) -> tuple:
        return (
            self.id,
            self.email,
            self.password,
            self.first_name,
            self.last_name,
            self.phone_number,
            self.profile_image_url,
            self.active,
            frozenset(self.roles),
            self.senior_code,
            self.emergency_contact,
            self.medical_conditions,
            self.medications,
        )

    def __eq__(self, other: Any) -> bool:
        """Compare persons by business attributes, ignoring timestamps."""
        if not isinstance(other, Person):
            return False
        return self._business_key() == other._business_key()

    def __hash__(self) -> int:
        """Hash based on business attributes, ignoring timestamps."""
        return hash(self._business_key())
