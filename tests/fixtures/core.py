from __future__ import annotations

from collections.abc import Callable, Generator

import pytest
from sqlalchemy import StaticPool, event
from sqlmodel import Session, SQLModel, create_engine

from caretrek.core.services.database.db_session import _enable_sqlite_foreign_keys


@pytest.fixture
def engine():
    """A fresh in-memory SQLite engine with every table created."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    event.listen(engine, "connect", _enable_sqlite_foreign_keys)

    # Import models to register them with the metadata
    from caretrek.entities.person.table import (  # noqa: F401
        PersonRoleTable,
        PersonTable,
        SeniorFamilyLinkTable,
    )

    SQLModel.metadata.create_all(engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def session(engine) -> Generator[Session]:
    """Create a fresh database session for testing."""
    with Session(engine) as session:
        try:
            yield session
        finally:
            session.rollback()


@pytest.fixture
def person_service(session: Session):
    from caretrek.core.services import PersonManagementService

    return PersonManagementService(session)


@pytest.fixture
def make_person() -> Callable[..., object]:
    """Build an unsaved ``Person`` with sensible defaults."""
    from caretrek.entities.person import Person

    counter = {"n": 0}

    def _make(**overrides):
        counter["n"] += 1
        n = counter["n"]
        data = {
            "email": f"person{n}@example.com",
            "password": "not-a-real-hash",
            "first_name": f"First{n}",
            "last_name": f"Last{n}",
        }
        data.update(overrides)
        return Person(**data)

    return _make
