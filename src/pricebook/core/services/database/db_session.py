"""Database engine and session factory used across the application."""

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from loguru import logger
from sqlalchemy import Engine, text
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, create_engine

from src.pricebook.runtime.config.config_data import ConfigData
from src.pricebook.runtime.context import get_config


def _engine_options(config: ConfigData) -> dict[str, Any]:
    """Engine keyword arguments for the configured backend.

    SQLite keeps its default pool, so pool sizing only applies to server
    databases.
    """
    database = config.database
    options: dict[str, Any] = {"pool_pre_ping": True, "echo": False}

    if database.is_sqlite:
        # Sessions move between FastAPI worker threads
        options["connect_args"] = {"check_same_thread": False, "timeout": 20}
        if config.app.environment == "production":
            logger.warning("Running on SQLite in production; PostgreSQL is recommended")
        return options

    options.update(
        pool_size=database.pool_size,
        max_overflow=database.max_overflow,
        pool_timeout=database.pool_timeout,
        pool_recycle=database.pool_recycle,
    )
    if database.url.startswith("postgresql"):
        options["connect_args"] = {
            "application_name": f"pricebook_{config.app.environment}",
            "connect_timeout": 30,
        }
    return options


class DbSessionService:
    """Owns the engine and hands out sessions bound to it."""

    def __init__(self, engine: Engine | None = None):
        if engine is None:
            config = get_config()
            engine = create_engine(config.database.connection_string, **_engine_options(config))
            logger.info(
                "Database engine ready ({}, {})",
                engine.url.get_backend_name(),
                config.app.environment,
            )
        self._engine = engine

    @property
    def engine(self) -> Engine:
        return self._engine

    def get_session(self) -> Session:
        # Entities are read after commit, so keep loaded state
        return Session(self._engine, expire_on_commit=False)

    @contextmanager
    def session_scope(self) -> Iterator[Session]:
        """Yield a session that is committed on success and always closed."""
        session = self.get_session()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def health_check(self) -> bool:
        """Return True if the database answers a trivial query."""
        try:
            with self._engine.connect() as connection:
                connection.execute(text("SELECT 1"))
        except SQLAlchemyError as e:
            logger.bind(error_type=type(e).__name__).error("Database health check failed: {}", e)
            return False
        return True

    def dispose(self) -> None:
        self._engine.dispose()
