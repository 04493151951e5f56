"""Unit tests for role tags and the pure predicates over a role set."""

import pytest

from caretrek.entities.person import Role, full_name, is_family_member, is_senior, parse_role


class TestRolePredicates:
    """is_senior / is_family_member depend only on set membership."""

    @pytest.mark.parametrize(
        ("roles", "senior", "family"),
        [
            (set(), False, False),
            ({Role.SENIOR}, True, False),
            ({Role.FAMILY}, False, True),
            ({Role.SENIOR, Role.FAMILY}, True, True),
            ({Role.ADMIN}, False, False),
            ({Role.ADMIN, Role.FAMILY}, False, True),
        ],
    )
    def test_predicates_follow_membership(self, roles, senior, family):
        assert is_senior(roles) is senior
        assert is_family_member(roles) is family

    def test_predicates_accept_any_iterable(self):
        """Lists and generators work as well as sets."""
        assert is_senior([Role.FAMILY, Role.SENIOR])
        assert is_family_member(role for role in [Role.FAMILY])

    def test_roles_are_stored_by_name(self):
        assert Role.SENIOR.value == "ROLE_SENIOR"
        assert Role.FAMILY.value == "ROLE_FAMILY"
        assert Role("ROLE_ADMIN") is Role.ADMIN


class TestFullName:
    @pytest.mark.parametrize(
        ("first", "last", "expected"),
        [
            ("Ada", "Lovelace", "Ada Lovelace"),
            ("", "Lovelace", " Lovelace"),
            ("Ada", "", "Ada "),
            ("", "", " "),
            ("Mary Ann", "Smith", "Mary Ann Smith"),
        ],
    )
    def test_single_space_join(self, first, last, expected):
        """Names are joined with exactly one space, even when empty."""
        assert full_name(first, last) == expected


class TestParseRole:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("senior", Role.SENIOR),
            ("FAMILY", Role.FAMILY),
            (" ROLE_ADMIN ", Role.ADMIN),
            ("role_senior", Role.SENIOR),
            (Role.FAMILY, Role.FAMILY),
        ],
    )
    def test_accepts_short_and_stored_names(self, value, expected):
        assert parse_role(value) is expected

    def test_rejects_unknown_role(self):
        with pytest.raises(ValueError, match="Unknown role"):
            parse_role("caregiver")
