import pytest

from caretrek.entities.person import Relationship, parse_relationship


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("child", Relationship.CHILD),
        (" Spouse ", Relationship.SPOUSE),
        ("CAREGIVER", Relationship.CAREGIVER),
        (Relationship.SIBLING, Relationship.SIBLING),
    ],
)
def test_parse_relationship(value, expected):
    assert parse_relationship(value) is expected


def test_unknown_relationship():
    with pytest.raises(ValueError, match="Unknown relationship"):
        parse_relationship("neighbour")
