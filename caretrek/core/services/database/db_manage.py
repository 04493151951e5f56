"""Schema management for the application database."""

from loguru import logger
from sqlalchemy.engine import Engine
from sqlmodel import SQLModel


class DbManageService:
    def __init__(self, engine: Engine):
        self._engine = engine

    def create_all(self) -> None:
        """Create all database tables."""
        # Importing the table modules registers them with SQLModel.metadata
        from caretrek.entities.person.table import (  # noqa: F401
            PersonRoleTable,
            PersonTable,
            SeniorFamilyLinkTable,
        )

        SQLModel.metadata.create_all(self._engine)
        logger.info("Database initialized with tables: {}", sorted(SQLModel.metadata.tables))

    def drop_all(self) -> None:
        SQLModel.metadata.drop_all(self._engine)
        logger.warning("Dropped all database tables")
