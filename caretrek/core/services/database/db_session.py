"""Database engine and session factory used across the application."""

from collections.abc import Iterator
from contextlib import contextmanager

from loguru import logger
from sqlalchemy import StaticPool, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, create_engine

from caretrek.runtime.config.config_data import ConfigData
from caretrek.runtime.context import get_config


def _enable_sqlite_foreign_keys(dbapi_connection, _connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def build_engine(config: ConfigData) -> Engine:
    """Create an engine tuned for the configured backend."""
    db_config = config.database

    if db_config.is_sqlite:
        engine_kwargs: dict = {
            "echo": db_config.echo,
            "connect_args": {
                "check_same_thread": False,
                "timeout": 20,  # lock timeout
            },
        }
        if ":memory:" in db_config.url or db_config.url in ("sqlite://", "sqlite:///"):
            # one shared connection, otherwise every checkout sees an empty database
            engine_kwargs["poolclass"] = StaticPool
        if config.app.environment == "production":
            logger.warning(
                "SQLite is not recommended for production use. "
                "Consider PostgreSQL for better performance and reliability."
            )
    else:
        engine_kwargs = {
            "pool_size": db_config.pool_size,
            "max_overflow": db_config.max_overflow,
            "pool_timeout": db_config.pool_timeout,
            "pool_recycle": db_config.pool_recycle,
            "pool_pre_ping": True,
            "echo": db_config.echo,
            "connect_args": {
                "application_name": f"{config.app.name}_{config.app.environment}",
                "connect_timeout": 30,
            },
        }

    engine = create_engine(db_config.connection_string, **engine_kwargs)
    if db_config.is_sqlite:
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
    return engine


class DbSessionService:
    def __init__(self, engine: Engine | None = None):
        """Initialize the shared database engine and session factory."""
        main_config = get_config()
        if engine is None:
            logger.info(
                "Configuring database engine for environment: {}",
                main_config.app.environment,
            )
            engine = build_engine(main_config)
        self._engine = engine

    @property
    def engine(self) -> Engine:
        return self._engine

    def get_session(self) -> Session:
        """Return a new SQLModel session bound to the shared engine."""
        return Session(
            self._engine,
            expire_on_commit=False,  # Prevent lazy loading issues
            autoflush=True,
        )

    @contextmanager
    def session_scope(self) -> Iterator[Session]:
        """Commit on success, roll back on error, always close."""
        db = self.get_session()
        try:
            yield db
            db.commit()
        except Exception as e:
            db.rollback()
            if isinstance(e, SQLAlchemyError):
                logger.bind(error_type=type(e).__name__).error(
                    "Database transaction failed: {}", e
                )
            else:
                logger.bind(error_type=type(e).__name__).debug(
                    "Transaction rolled back: {}", e
                )
            raise
        finally:
            db.close()

    def health_check(self) -> bool:
        """Perform a health check on the database connection."""
        try:
            with self._engine.connect() as connection:
                connection.execute(text("SELECT 1"))
                return True
        except Exception as e:
            logger.bind(error_type=type(e).__name__).error(
                "Database health check failed: {}", e
            )
            return False

    def get_pool_status(self) -> dict:
        """Get current connection pool status for monitoring.

        Pools without counters (SQLite's StaticPool) report zeros.
        """
        pool = self._engine.pool

        def counter(name: str) -> int:
            method = getattr(pool, name, None)
            return method() if callable(method) else 0

        return {
            "size": counter("size"),
            "checked_in": counter("checkedin"),
            "checked_out": counter("checkedout"),
            "overflow": counter("overflow"),
        }

    def dispose(self) -> None:
        self._engine.dispose()
