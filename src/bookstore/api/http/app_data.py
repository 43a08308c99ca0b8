from dataclasses import dataclass

from src.bookstore.api.http.services import ServiceProfile
from src.bookstore.core.services import (
    BookService,
    DbManageService,
    DbSessionService,
    ReadServiceClient,
)
from src.bookstore.runtime.config.config_data import ConfigData


@dataclass
class ApplicationDependencies:
    config: ConfigData
    profile: ServiceProfile
    database_service: DbSessionService | None = None
    schema: DbManageService | None = None
    book_service: BookService | None = None
    read_client: ReadServiceClient | None = None
