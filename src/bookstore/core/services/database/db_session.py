"""Database engine and session factory used across the application."""

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from loguru import logger
from sqlalchemy import StaticPool, text
from sqlalchemy.engine import make_url
from sqlmodel import Session, create_engine

from src.bookstore.runtime.config.config_data import DatabaseConfig


class DbSessionService:
    """Handle to the shared collection: owns the engine and hands out sessions."""

    def __init__(self, db_config: DatabaseConfig):
        """Create the engine; no connection is opened until first use."""

        self._config = db_config
        engine_kwargs = self._get_engine_kwargs(db_config)
        logger.info("Initializing database engine for {}", self.safe_url)
        self._engine = create_engine(db_config.url, **engine_kwargs)

    @staticmethod
    def _get_engine_kwargs(db_config: DatabaseConfig) -> dict[str, Any]:
        """Engine options for the configured backend."""
        if db_config.is_in_memory:
            # A single shared connection keeps the in-memory database alive
            return {
                "echo": False,
                "poolclass": StaticPool,
                "connect_args": {"check_same_thread": False},
            }

        if db_config.is_sqlite:
            return {
                "echo": False,
                "pool_pre_ping": True,
                "connect_args": {"check_same_thread": False, "timeout": 20},
            }

        return {
            "echo": False,
            "echo_pool": False,
            "pool_size": db_config.pool_size,
            "max_overflow": db_config.max_overflow,
            "pool_timeout": db_config.pool_timeout,
            "pool_recycle": db_config.pool_recycle,
            "pool_pre_ping": True,
            "connect_args": {"connect_timeout": db_config.connect_timeout},
        }

    @property
    def engine(self):
        return self._engine

    @property
    def safe_url(self) -> str:
        """The connection URL with any password masked."""
        return make_url(self._config.url).render_as_string(hide_password=True)

    def get_session(self) -> Session:
        """Return a new SQLModel session bound to the shared engine."""
        return Session(
            self._engine,
            expire_on_commit=False,
            autoflush=True,
        )

    @contextmanager
    def session_scope(self) -> Iterator[Session]:
        """Transactional scope: commit on success, roll back and re-raise on error."""
        db = self.get_session()
        try:
            yield db
            db.commit()
        except Exception as e:
            db.rollback()
            logger.debug(
                "Database transaction rolled back",
                error_type=type(e).__name__,
                error_message=str(e),
            )
            raise
        finally:
            db.close()

    def ping(self) -> None:
        """Run a trivial query; raises the driver error when the store is down."""
        with self._engine.connect() as connection:
            connection.execute(text("SELECT 1"))

    def health_check(self) -> bool:
        """Perform a health check on the database connection."""
        try:
            self.ping()
            return True
        except Exception as e:
            logger.error(
                "Database health check failed",
                error_type=type(e).__name__,
                error_message=str(e),
            )
            return False

    def dispose(self) -> None:
        """Close every pooled connection."""
        self._engine.dispose()
