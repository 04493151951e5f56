"""End-to-end tests for the ``caretrek`` command line."""

from pathlib import Path

import pytest
from typer.testing import CliRunner

from caretrek.cli import app
from caretrek.core.services import DbSessionService, PersonManagementService
from caretrek.entities.person import Relationship, Role
from caretrek.runtime.config.config_data import ConfigData
from caretrek.runtime.context import with_context

runner = CliRunner()


@pytest.fixture
def file_database(tmp_path: Path):
    """Point the configuration at a SQLite file shared by every command."""
    override = ConfigData()
    override.database.url = f"sqlite:///{tmp_path / 'cli.db'}"
    with with_context(override):
        result = runner.invoke(app, ["init-db"])
        assert result.exit_code == 0, result.output
        yield


def _lookup(email: str):
    db = DbSessionService()
    try:
        with db.session_scope() as session:
            return PersonManagementService(session).repository.get_by_email(email)
    finally:
        db.dispose()


def _add(email: str, *roles: str) -> None:
    args = ["persons", "add", email, "--password", "pw", "--first-name", "Al", "--last-name", "Ex"]
    for role in roles:
        args += ["--role", role]
    result = runner.invoke(app, args)
    assert result.exit_code == 0, result.output


def test_init_db(file_database):
    assert _lookup("nobody@example.com") is None


def test_add_senior_prints_code(file_database):
    result = runner.invoke(
        app,
        [
            "persons", "add", "rose@example.com",
            "--password", "pw",
            "--first-name", "Rose",
            "--last-name", "Tyler",
            "--role", "senior",
            "--medications", "Aspirin",
        ],
    )

    assert result.exit_code == 0, result.output
    senior = _lookup("rose@example.com")
    assert senior.is_senior()
    assert senior.medications == "Aspirin"
    assert f"Senior code: {senior.senior_code}" in result.output


def test_duplicate_email_exits_with_error(file_database):
    _add("dup@example.com")

    result = runner.invoke(
        app,
        ["persons", "add", "dup@example.com", "--password", "pw",
         "--first-name", "A", "--last-name", "B"],
    )

    assert result.exit_code == 1
    assert "already registered" in result.output


def test_unknown_role_is_bad_parameter(file_database):
    result = runner.invoke(
        app,
        ["persons", "add", "x@example.com", "--password", "pw",
         "--first-name", "A", "--last-name", "B", "--role", "nurse"],
    )

    assert result.exit_code != 0
    assert _lookup("x@example.com") is None


def test_link_and_show_family(file_database):
    _add("senior@example.com", "senior")
    _add("family@example.com", "family")
    senior = _lookup("senior@example.com")
    family = _lookup("family@example.com")

    result = runner.invoke(app, ["persons", "link", family.id, senior.senior_code])
    assert result.exit_code == 0, result.output
    assert "Linked to" in result.output

    result = runner.invoke(app, ["persons", "family", senior.id])
    assert result.exit_code == 0, result.output
    assert "1 family member(s)" in result.output

    result = runner.invoke(app, ["persons", "unlink", family.id, senior.id])
    assert result.exit_code == 0, result.output
    assert "Link removed" in result.output

    result = runner.invoke(app, ["persons", "family", senior.id])
    assert "0 family member(s)" in result.output


def test_link_with_unknown_code(file_database):
    _add("family@example.com", "family")
    family = _lookup("family@example.com")

    result = runner.invoke(app, ["persons", "link", family.id, "nope"])

    assert result.exit_code == 1
    assert "No senior found" in result.output


def test_grant_role(file_database):
    _add("later@example.com")
    person = _lookup("later@example.com")

    result = runner.invoke(app, ["persons", "grant", person.id, "senior"])

    assert result.exit_code == 0, result.output
    updated = _lookup("later@example.com")
    assert Role.SENIOR in updated.roles
    assert updated.senior_code is not None


def test_list_empty(file_database):
    result = runner.invoke(app, ["persons", "list"])

    assert result.exit_code == 0
    assert "No persons found" in result.output


def test_list_by_role(file_database):
    _add("senior@example.com", "senior")
    _add("family@example.com", "family")

    result = runner.invoke(app, ["persons", "list", "--role", "senior"])

    assert result.exit_code == 0, result.output
    assert "Showing 1 persons" in result.output


def _relationship(family_id: str, senior_id: str):
    db = DbSessionService()
    try:
        with db.session_scope() as session:
            return PersonManagementService(session).relationship(family_id, senior_id)
    finally:
        db.dispose()


def test_link_with_relationship(file_database):
    _add("senior@example.com", "senior")
    _add("family@example.com", "family")
    senior = _lookup("senior@example.com")
    family = _lookup("family@example.com")

    result = runner.invoke(
        app, ["persons", "link", family.id, senior.senior_code, "--relationship", "Spouse"]
    )

    assert result.exit_code == 0, result.output
    assert _relationship(family.id, senior.id) is Relationship.SPOUSE


def test_link_with_unknown_relationship(file_database):
    _add("senior@example.com", "senior")
    _add("family@example.com", "family")
    senior = _lookup("senior@example.com")
    family = _lookup("family@example.com")

    result = runner.invoke(
        app, ["persons", "link", family.id, senior.senior_code, "--relationship", "neighbour"]
    )

    assert result.exit_code != 0
    assert _relationship(family.id, senior.id) is None
