"""Database initialization script."""

from src.bookstore.core.services.database import DbManageService, StorageGateway
from src.bookstore.runtime.config.config_data import ConfigData
from src.bookstore.runtime.context import get_config
from src.bookstore.runtime.seed import SEED_SERVICE


def init_db(config: ConfigData | None = None) -> None:
    """Create the book collection if it does not exist yet."""
    config = config or get_config()
    gateway = StorageGateway(config.database, config.service(SEED_SERVICE).startup)
    database_service = gateway.connect()
    try:
        DbManageService(database_service).create_all()
    finally:
        database_service.dispose()


if __name__ == "__main__":
    init_db()
