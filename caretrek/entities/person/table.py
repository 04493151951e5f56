"""Person database table models."""

from sqlalchemy import Column, ForeignKey, String
from sqlmodel import Field, SQLModel

from caretrek.entities._base import EntityTable


class PersonTable(EntityTable, table=True):
    """Database persistence model for persons.

    Roles and links are stored in their own tables; this row carries only
    the scalar attributes.
    """

    __tablename__ = "person"

    email: str = Field(sa_column=Column(String(320), nullable=False, unique=True))
    password: str = Field(sa_column=Column(String(255), nullable=False))
    first_name: str = Field(sa_column=Column(String(255), nullable=False))
    last_name: str = Field(sa_column=Column(String(255), nullable=False))
    phone_number: str | None = Field(
        default=None, sa_column=Column(String(32), nullable=True, unique=True)
    )
    profile_image_url: str | None = None
    active: bool = Field(default=True, nullable=False)

    senior_code: str | None = Field(
        default=None, sa_column=Column(String(12), nullable=True, unique=True)
    )
    emergency_contact: str | None = None
    medical_conditions: str | None = None
    medications: str | None = None


class PersonRoleTable(SQLModel, table=True):
    """One row per (person, role). The composite key rules out duplicates."""

    __tablename__ = "person_role"

    person_id: str = Field(
        sa_column=Column(
            String,
            ForeignKey("person.id", ondelete="CASCADE"),
            primary_key=True,
        )
    )
    role: str = Field(sa_column=Column(String(32), primary_key=True))


class SeniorFamilyLinkTable(SQLModel, table=True):
    """Join table from a family member to a senior they follow."""

    __tablename__ = "senior_family_link"

    family_member_id: str = Field(
        sa_column=Column(
            String,
            ForeignKey("person.id", ondelete="CASCADE"),
            primary_key=True,
        )
    )
    senior_id: str = Field(
        sa_column=Column(
            String,
            ForeignKey("person.id", ondelete="CASCADE"),
            primary_key=True,
            index=True,
        )
    )
    relationship: str | None = Field(
        default=None, sa_column=Column(String(16), nullable=True)
    )
