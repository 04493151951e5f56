from collections.abc import Iterable
from typing import NoReturn

from loguru import logger
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session

from caretrek.core.exceptions import (
    DuplicatePersonError,
    LinkageError,
    PersonNotFoundError,
    SeniorCodeExhaustedError,
)
from caretrek.core.security import generate_senior_code, hash_password, verify_password
from caretrek.entities.person import Person, PersonRepository, Relationship, Role
from caretrek.runtime.context import get_config

# bcrypt only looks at the first 72 bytes of a password
MAX_PASSWORD_BYTES = 72

PROFILE_FIELDS = frozenset(
    {
        "first_name",
        "last_name",
        "phone_number",
        "profile_image_url",
        "emergency_contact",
        "medical_conditions",
        "medications",
    }
)

# set at registration through their own parameters
_REGISTER_FIELDS = PROFILE_FIELDS - {"first_name", "last_name"}
_REQUIRED_FIELDS = frozenset({"first_name", "last_name"})

# unique person columns and how errors name them
_UNIQUE_FIELDS = {
    "email": "Email",
    "phone_number": "Phone number",
    "senior_code": "Senior code",
}


def normalize_email(email: str) -> str:
    return email.strip().lower()


def unique_conflict(error: IntegrityError) -> str | None:
    """Name of the unique person column ``error`` violated, if any.

    SQLite reports ``UNIQUE constraint failed: person.<column>``; PostgreSQL
    reports ``duplicate key ... Key (<column>)=...``.
    """
    message = str(error.orig).lower()
    if "unique" not in message and "duplicate" not in message:
        return None
    for field in _UNIQUE_FIELDS:
        if field in message:
            return field
    return None


def _normalize_optional(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


def _check_password(password: str) -> None:
    if not password:
        raise ValueError("Password must not be empty")
    if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValueError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")


class PersonManagementService:
    """Registration, roles and senior linking on top of ``PersonRepository``.

    Each public method is one unit of work: it commits on success and
    rolls back before raising.
    """

    def __init__(self, db_session: Session):
        self._db_session = db_session
        self._person_repo = PersonRepository(db_session)

    @property
    def repository(self) -> PersonRepository:
        return self._person_repo

    def _require(self, person_id: str) -> Person:
        person = self._person_repo.get(person_id)
        if person is None:
            raise PersonNotFoundError(person_id)
        return person

    def _allocate_senior_code(self) -> str:
        persons_config = get_config().persons
        for _ in range(persons_config.senior_code_max_attempts):
            code = generate_senior_code(persons_config.senior_code_length)
            if not self._person_repo.senior_code_exists(code):
                return code
        raise SeniorCodeExhaustedError(
            f"No free senior code after {persons_config.senior_code_max_attempts} attempts"
        )

    def _integrity_failure(self, error: IntegrityError) -> NoReturn:
        """Roll back, then raise ``DuplicatePersonError`` for unique conflicts.

        Any other constraint failure propagates unchanged.
        """
        self._db_session.rollback()
        field = unique_conflict(error)
        if field is None:
            raise error
        raise DuplicatePersonError(f"{_UNIQUE_FIELDS[field]} already registered") from error

    def _commit(self) -> None:
        try:
            self._db_session.commit()
        except IntegrityError as e:
            self._integrity_failure(e)

    def _update(self, person: Person) -> Person:
        try:
            updated = self._person_repo.update(person)
        except IntegrityError as e:
            self._integrity_failure(e)
        self._commit()
        return updated

    def register(
        self,
        email: str,
        password: str,
        first_name: str,
        last_name: str,
        roles: Iterable[Role] = (),
        **profile: str | None,
    ) -> Person:
        """Create a person with a hashed password.

        Seniors receive a unique senior code. Extra keyword arguments set
        optional profile fields such as ``phone_number`` or ``medications``.

        Raises:
            ValueError: On an empty or over-long password or an unknown profile field
            DuplicatePersonError: When the email or phone number is taken
        """
        unknown = set(profile) - _REGISTER_FIELDS
        if unknown:
            raise ValueError(f"Unknown profile fields: {sorted(unknown)}")
        _check_password(password)

        email = normalize_email(email)
        phone_number = _normalize_optional(profile.pop("phone_number", None))

        if self._person_repo.get_by_email(email) is not None:
            raise DuplicatePersonError(f"Email {email} is already registered")
        if phone_number and self._person_repo.get_by_phone_number(phone_number):
            raise DuplicatePersonError(f"Phone number {phone_number} is already registered")

        role_set = {Role(role) for role in roles}
        password_hash = hash_password(password)
        attempts = get_config().persons.senior_code_max_attempts

        for _ in range(attempts):
            senior_code = self._allocate_senior_code() if Role.SENIOR in role_set else None
            person = Person(
                email=email,
                password=password_hash,
                first_name=first_name,
                last_name=last_name,
                phone_number=phone_number,
                roles=role_set,
                senior_code=senior_code,
                **profile,
            )
            try:
                created = self._person_repo.create(person)
                break
            except IntegrityError as e:
                # another registration took the code between check and insert
                if senior_code is None or unique_conflict(e) != "senior_code":
                    self._integrity_failure(e)
                self._db_session.rollback()
                logger.warning("Senior code {} was taken concurrently; retrying", senior_code)
        else:
            raise SeniorCodeExhaustedError(f"No free senior code after {attempts} attempts")
        self._commit()

        logger.info(
            "Registered person {} with roles {}",
            created.id,
            sorted(role.value for role in created.roles),
        )
        return created

    def get(self, person_id: str) -> Person:
        return self._require(person_id)

    def authenticate(self, email: str, password: str) -> Person | None:
        """Return the active person matching the credentials, else ``None``."""
        person = self._person_repo.get_by_email(normalize_email(email))
        if person is None or not person.active:
            return None
        if not verify_password(password, person.password):
            return None
        return person

    def change_password(self, person_id: str, new_password: str) -> Person:
        _check_password(new_password)
        person = self._require(person_id)
        person.password = hash_password(new_password)
        return self._update(person)

    def update_profile(self, person_id: str, **changes: str | None) -> Person:
        unknown = set(changes) - PROFILE_FIELDS
        if unknown:
            raise ValueError(f"Unknown profile fields: {sorted(unknown)}")
        for name in _REQUIRED_FIELDS & set(changes):
            if changes[name] is None or not changes[name].strip():
                raise ValueError(f"{name} must not be empty")

        person = self._require(person_id)
        if "phone_number" in changes:
            changes["phone_number"] = _normalize_optional(changes["phone_number"])
        for name, value in changes.items():
            setattr(person, name, value)
        return self._update(person)

    def deactivate(self, person_id: str) -> Person:
        person = self._require(person_id)
        person.active = False
        updated = self._update(person)
        logger.info("Deactivated person {}", person_id)
        return updated

    def grant_role(self, person_id: str, role: Role) -> Person:
        """Add ``role``. Granting SENIOR assigns a senior code if missing."""
        role = Role(role)
        person = self._require(person_id)
        person.roles.add(role)
        if role is Role.SENIOR and person.senior_code is None:
            person.senior_code = self._allocate_senior_code()
        updated = self._update(person)
        logger.debug("Granted {} to person {}", role.value, person_id)
        return updated

    def revoke_role(self, person_id: str, role: Role) -> Person:
        """Remove ``role``. The senior code and existing links are kept."""
        role = Role(role)
        person = self._require(person_id)
        person.roles.discard(role)
        updated = self._update(person)
        logger.debug("Revoked {} from person {}", role.value, person_id)
        return updated

    def link(
        self,
        family_member_id: str,
        senior_id: str,
        relationship: Relationship | None = None,
    ) -> Person:
        """Add ``senior_id`` to the family member's linked seniors."""
        family_member = self._require(family_member_id)
        senior = self._require(senior_id)
        return self._link(family_member, senior, relationship)

    def link_by_code(
        self,
        family_member_id: str,
        senior_code: str,
        relationship: Relationship | None = None,
    ) -> Person:
        """Link using the code a senior shared. Returns the senior."""
        family_member = self._require(family_member_id)
        senior = self._person_repo.get_by_senior_code(senior_code.strip())
        if senior is None:
            raise LinkageError(f"No senior found for code {senior_code}")
        return self._link(family_member, senior, relationship)

    def _link(
        self, family_member: Person, senior: Person, relationship: Relationship | None
    ) -> Person:
        if family_member.id == senior.id:
            raise LinkageError("A person cannot link to themselves")
        if not family_member.is_family_member():
            raise LinkageError(f"Person {family_member.id} is not a family member")
        if not senior.is_senior():
            raise LinkageError(f"Person {senior.id} is not a senior")
        if not senior.active:
            raise LinkageError(f"Senior {senior.id} is not active")

        created = self._person_repo.link(family_member.id, senior.id, relationship)
        self._commit()
        if created:
            logger.info("Linked family member {} to senior {}", family_member.id, senior.id)
        else:
            logger.debug(
                "Family member {} already linked to senior {}", family_member.id, senior.id
            )
        return senior

    def relationship(self, family_member_id: str, senior_id: str) -> Relationship | None:
        return self._person_repo.relationship_of(family_member_id, senior_id)

    def unlink(self, family_member_id: str, senior_id: str) -> bool:
        removed = self._person_repo.unlink(family_member_id, senior_id)
        if removed:
            self._commit()
            logger.info("Unlinked family member {} from senior {}", family_member_id, senior_id)
        return removed

    def linked_seniors(self, family_member_id: str) -> list[Person]:
        self._require(family_member_id)
        return self._person_repo.linked_seniors(family_member_id)

    def family_members(self, senior_id: str) -> list[Person]:
        self._require(senior_id)
        return self._person_repo.family_members(senior_id)

    def delete(self, person_id: str) -> None:
        if not self._person_repo.delete(person_id):
            raise PersonNotFoundError(person_id)
        self._commit()
        logger.info("Deleted person {}", person_id)
