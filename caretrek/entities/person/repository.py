"""Person data-access layer."""

from collections import defaultdict
from collections.abc import Iterable, Sequence

from sqlmodel import Session, col, select

from caretrek.entities._base import utc_now
from caretrek.entities.person.entity import Person
from caretrek.entities.person.relationship import Relationship
from caretrek.entities.person.roles import Role
from caretrek.entities.person.table import (
    PersonRoleTable,
    PersonTable,
    SeniorFamilyLinkTable,
)

_SCALAR_FIELDS = (
    "email",
    "password",
    "first_name",
    "last_name",
    "phone_number",
    "profile_image_url",
    "active",
    "senior_code",
    "emergency_contact",
    "medical_conditions",
    "medications",
)


class PersonRepository:
    """Data-access layer for persons, their roles and senior links.

    The repository flushes but never commits; the caller owns the
    transaction. Storage constraint failures (duplicate email, phone number
    or senior code) propagate as ``sqlalchemy.exc.IntegrityError``.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    # -- mapping -------------------------------------------------------

    def _roles_for(self, person_ids: Sequence[str]) -> dict[str, set[Role]]:
        roles: dict[str, set[Role]] = defaultdict(set)
        if not person_ids:
            return roles
        statement = select(PersonRoleTable).where(
            col(PersonRoleTable.person_id).in_(person_ids)
        )
        for row in self._session.exec(statement):
            roles[row.person_id].add(Role(row.role))
        return roles

    def _to_entity(self, row: PersonTable, roles: set[Role] | None = None) -> Person:
        if roles is None:
            roles = self._roles_for([row.id]).get(row.id, set())
        data = row.model_dump()
        data["roles"] = roles
        return Person.model_validate(data)

    def _to_entities(self, rows: Iterable[PersonTable]) -> list[Person]:
        rows = list(rows)
        roles = self._roles_for([row.id for row in rows])
        return [self._to_entity(row, roles.get(row.id, set())) for row in rows]

    def _delete_all(self, statement) -> None:
        for row in self._session.exec(statement).all():
            self._session.delete(row)

    def _replace_roles(self, person_id: str, roles: Iterable[Role]) -> None:
        self._delete_all(
            select(PersonRoleTable).where(col(PersonRoleTable.person_id) == person_id)
        )
        self._session.flush()
        for role in set(roles):
            self._session.add(PersonRoleTable(person_id=person_id, role=Role(role).value))

    # -- CRUD ----------------------------------------------------------

    def create(self, person: Person) -> Person:
        """Insert ``person`` and its roles, flushing so constraints are checked now."""
        row = PersonTable(
            id=person.id,
            created_at=person.created_at,
            updated_at=person.updated_at,
            **{name: getattr(person, name) for name in _SCALAR_FIELDS},
        )
        self._session.add(row)
        self._session.flush()
        for role in person.roles:
            self._session.add(PersonRoleTable(person_id=row.id, role=role.value))
        self._session.flush()
        return self._to_entity(row, set(person.roles))

    def get(self, person_id: str) -> Person | None:
        row = self._session.get(PersonTable, person_id)
        if row is None:
            return None
        return self._to_entity(row)

    def _get_one(self, column, value) -> Person | None:
        statement = select(PersonTable).where(column == value)
        row = self._session.exec(statement).first()
        if row is None:
            return None
        return self._to_entity(row)

    def get_by_email(self, email: str) -> Person | None:
        return self._get_one(col(PersonTable.email), email)

    def get_by_phone_number(self, phone_number: str) -> Person | None:
        return self._get_one(col(PersonTable.phone_number), phone_number)

    def get_by_senior_code(self, senior_code: str) -> Person | None:
        return self._get_one(col(PersonTable.senior_code), senior_code)

    def senior_code_exists(self, senior_code: str) -> bool:
        statement = select(PersonTable.id).where(
            col(PersonTable.senior_code) == senior_code
        )
        return self._session.exec(statement).first() is not None

    def list_all(self) -> list[Person]:
        statement = select(PersonTable).order_by(
            col(PersonTable.last_name), col(PersonTable.first_name)
        )
        return self._to_entities(self._session.exec(statement))

    def list_by_role(self, role: Role) -> list[Person]:
        statement = (
            select(PersonTable)
            .join(PersonRoleTable, col(PersonRoleTable.person_id) == col(PersonTable.id))
            .where(col(PersonRoleTable.role) == Role(role).value)
            .order_by(col(PersonTable.last_name), col(PersonTable.first_name))
        )
        return self._to_entities(self._session.exec(statement))

    def update(self, person: Person) -> Person:
        """Persist every attribute of ``person``, replacing its role set."""
        row = self._session.get(PersonTable, person.id)
        if row is None:
            raise ValueError(f"Person with id {person.id} not found")

        for name in _SCALAR_FIELDS:
            setattr(row, name, getattr(person, name))
        row.updated_at = utc_now()
        self._session.add(row)
        self._replace_roles(person.id, person.roles)
        self._session.flush()
        return self._to_entity(row, set(person.roles))

    def delete(self, person_id: str) -> bool:
        """Delete a person together with its role rows and links."""
        row = self._session.get(PersonTable, person_id)
        if row is None:
            return False

        self._delete_all(
            select(PersonRoleTable).where(col(PersonRoleTable.person_id) == person_id)
        )
        self._delete_all(
            select(SeniorFamilyLinkTable).where(
                (col(SeniorFamilyLinkTable.family_member_id) == person_id)
                | (col(SeniorFamilyLinkTable.senior_id) == person_id)
            )
        )
        self._session.flush()
        self._session.delete(row)
        self._session.flush()
        return True

    # -- roles ---------------------------------------------------------

    def add_role(self, person_id: str, role: Role) -> bool:
        """Add ``role``; returns False when the person already holds it."""
        role = Role(role)
        if self._session.get(PersonRoleTable, (person_id, role.value)) is not None:
            return False
        self._session.add(PersonRoleTable(person_id=person_id, role=role.value))
        self._session.flush()
        return True

    def remove_role(self, person_id: str, role: Role) -> bool:
        row = self._session.get(PersonRoleTable, (person_id, Role(role).value))
        if row is None:
            return False
        self._session.delete(row)
        self._session.flush()
        return True

    # -- linkage -------------------------------------------------------

    def is_linked(self, family_member_id: str, senior_id: str) -> bool:
        link = self._session.get(SeniorFamilyLinkTable, (family_member_id, senior_id))
        return link is not None

    def link(
        self,
        family_member_id: str,
        senior_id: str,
        relationship: Relationship | None = None,
    ) -> bool:
        """Store the pair once; returns False when it already exists.

        Re-linking an existing pair with a ``relationship`` updates the label.
        """
        label = Relationship(relationship).value if relationship is not None else None
        link = self._session.get(SeniorFamilyLinkTable, (family_member_id, senior_id))
        if link is not None:
            if label is not None and link.relationship != label:
                link.relationship = label
                self._session.add(link)
                self._session.flush()
            return False
        self._session.add(
            SeniorFamilyLinkTable(
                family_member_id=family_member_id,
                senior_id=senior_id,
                relationship=label,
            )
        )
        self._session.flush()
        return True

    def relationship_of(self, family_member_id: str, senior_id: str) -> Relationship | None:
        link = self._session.get(SeniorFamilyLinkTable, (family_member_id, senior_id))
        if link is None or link.relationship is None:
            return None
        return Relationship(link.relationship)

    def unlink(self, family_member_id: str, senior_id: str) -> bool:
        link = self._session.get(SeniorFamilyLinkTable, (family_member_id, senior_id))
        if link is None:
            return False
        self._session.delete(link)
        self._session.flush()
        return True

    def linked_seniors(self, family_member_id: str) -> list[Person]:
        """Seniors the family member links to."""
        statement = (
            select(PersonTable)
            .join(
                SeniorFamilyLinkTable,
                col(SeniorFamilyLinkTable.senior_id) == col(PersonTable.id),
            )
            .where(col(SeniorFamilyLinkTable.family_member_id) == family_member_id)
            .order_by(col(PersonTable.last_name), col(PersonTable.first_name))
        )
        return self._to_entities(self._session.exec(statement))

    def family_members(self, senior_id: str) -> list[Person]:
        """Persons whose linked seniors include ``senior_id``.

        Computed from the join table on every call; there is no stored
        inverse collection to keep in sync.
        """
        statement = (
            select(PersonTable)
            .join(
                SeniorFamilyLinkTable,
                col(SeniorFamilyLinkTable.family_member_id) == col(PersonTable.id),
            )
            .where(col(SeniorFamilyLinkTable.senior_id) == senior_id)
            .order_by(col(PersonTable.last_name), col(PersonTable.first_name))
        )
        return self._to_entities(self._session.exec(statement))
