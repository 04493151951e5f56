"""Unit tests for the Person domain entity."""

from uuid import UUID

from caretrek.entities.person import Person, Role


class TestPerson:
    """Test the Person domain entity."""

    def test_person_creation_with_defaults(self, make_person):
        """Person gets a UUID, timestamps, active=True and no roles."""
        person = make_person(first_name="Test", last_name="User", email="test@example.com")

        UUID(person.id)  # Raises ValueError if invalid
        assert person.created_at is not None
        assert person.updated_at is not None
        assert person.active is True
        assert person.roles == set()
        assert person.phone_number is None
        assert person.profile_image_url is None
        assert person.senior_code is None
        assert person.emergency_contact is None
        assert person.medical_conditions is None
        assert person.medications is None

    def test_senior_fields_exist_regardless_of_role(self, make_person):
        """Senior-specific fields can be set on any record."""
        person = make_person(
            roles={Role.FAMILY},
            emergency_contact="Jane, 555-0100",
            medical_conditions="Asthma",
            medications="Inhaler",
        )

        assert person.is_family_member()
        assert not person.is_senior()
        assert person.medications == "Inhaler"

    def test_role_set_has_no_duplicates(self, make_person):
        """Repeated roles collapse to one entry."""
        person = make_person(roles=[Role.SENIOR, Role.SENIOR, "ROLE_SENIOR"])

        assert person.roles == {Role.SENIOR}

        person.roles.add(Role.SENIOR)
        assert len(person.roles) == 1

    def test_predicates(self, make_person):
        both = make_person(roles={Role.SENIOR, Role.FAMILY})
        neither = make_person()

        assert both.is_senior() and both.is_family_member()
        assert not neither.is_senior() and not neither.is_family_member()

    def test_full_name(self, make_person):
        assert make_person(first_name="John", last_name="Doe").full_name == "John Doe"
        assert make_person(first_name="", last_name="").full_name == " "

    def test_equality_ignores_timestamps(self, make_person):
        """Persons compare by business attributes only."""
        person = make_person(id="1", roles={Role.SENIOR})
        clone = person.model_copy(update={"updated_at": person.updated_at.replace(year=2000)})
        other = person.model_copy(update={"email": "other@example.com"})

        assert person == clone
        assert hash(person) == hash(clone)
        assert person != other
        assert person != "not a person"

    def test_password_hidden_from_repr(self, make_person):
        person = make_person(password="$2b$secret-hash")

        assert "secret-hash" not in repr(person)
        assert person.email in repr(person)

    def test_validation_from_mapping(self):
        """Role names from storage are coerced into Role members."""
        person = Person.model_validate(
            {
                "email": "a@example.com",
                "password": "x",
                "first_name": "A",
                "last_name": "B",
                "roles": ["ROLE_FAMILY"],
            }
        )

        assert person.roles == {Role.FAMILY}
