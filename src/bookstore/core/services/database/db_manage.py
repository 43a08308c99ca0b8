"""Schema management for the shared collection."""

import threading

from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import SQLModel

from src.bookstore.core.services.database.db_session import DbSessionService


class DbManageService:
    """Create the collection and remember whether it exists."""

    def __init__(self, database_service: DbSessionService):
        self._database_service = database_service
        self._collection_ready = False
        self._lock = threading.Lock()

    @property
    def collection_ready(self) -> bool:
        return self._collection_ready

    def create_all(self) -> None:
        """Create the collection if it is missing; a no-op when it already exists."""
        from src.bookstore.entities.book import BookTable  # noqa: F401

        SQLModel.metadata.create_all(self._database_service.engine)
        self._collection_ready = True
        logger.info("Database initialized with tables.")

    def ensure_collection(self) -> bool:
        """Create the collection unless that already succeeded once.

        Returns:
            Whether the collection exists. A storage fault is logged and
            reported as ``False`` so that the next caller tries again.
        """
        if self._collection_ready:
            return True
        with self._lock:
            if self._collection_ready:
                return True
            try:
                self.create_all()
            except SQLAlchemyError as exc:
                logger.warning("Books collection not prepared: {}", exc)
                return False
        return True
