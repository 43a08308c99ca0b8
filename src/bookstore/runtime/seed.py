"""One-shot idempotent population of the canonical book records."""

from dataclasses import dataclass, field

from loguru import logger
from sqlalchemy.exc import IntegrityError

from src.bookstore.core.errors import SeedCorruptionError
from src.bookstore.core.services.database import (
    DbManageService,
    DbSessionService,
    StorageGateway,
)
from src.bookstore.entities.book import BookCreate, BookRepository
from src.bookstore.runtime.config.config_data import ConfigData

SEED_SERVICE = "data-seeder"

CANONICAL_BOOKS: tuple[BookCreate, ...] = (
    BookCreate(
        external_id="example1",
        title="The Vortex",
        author="José Eustasio Rivera",
        edition="958-30-0804-4",
        pages="292",
        year="1924",
    ),
    BookCreate(
        external_id="example2",
        title="Frankenstein",
        author="Mary Shelley",
        edition="978-3-649-64609-9",
        pages="280",
        year="1818",
    ),
    BookCreate(
        external_id="example3",
        title="The Black Cat",
        author="Edgar Allan Poe",
        edition="978-3-99168-238-7",
        pages="280",
        year="1843",
    ),
)


@dataclass
class SeedReport:
    """Outcome of one seeding run."""

    inserted: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.inserted) + len(self.skipped)


def seed_books(
    database_service: DbSessionService,
    books: tuple[BookCreate, ...] = CANONICAL_BOOKS,
) -> SeedReport:
    """Insert each canonical book that is not there yet.

    Zero matches inserts, one match skips, more than one aborts the run with
    :class:`SeedCorruptionError`. Each record is committed on its own so that
    an abort leaves the earlier inserts in place.
    """
    report = SeedReport()
    for book in books:
        try:
            with database_service.session_scope() as session:
                repository = BookRepository(session)
                matches = repository.count_by_external_id(book.external_id)
                if matches > 1:
                    raise SeedCorruptionError(book.external_id, matches)
                if matches == 1:
                    logger.info("Book already exists: {}", book.external_id)
                    report.skipped.append(book.external_id)
                    continue
                repository.add(book)
        except IntegrityError:
            # Another writer inserted the same id between the count and the insert
            logger.info("Book inserted concurrently: {}", book.external_id)
            report.skipped.append(book.external_id)
            continue

        logger.info("Inserted book: {}", book.external_id)
        report.inserted.append(book.external_id)

    return report


def run_seed(config: ConfigData) -> SeedReport:
    """Connect, make sure the collection exists, then seed it.

    Raises:
        StartupFailure: the store never became reachable.
        SeedCorruptionError: duplicate records were found.
    """
    logger.info("Data seeder starting...")
    gateway = StorageGateway(config.database, config.service(SEED_SERVICE).startup)
    database_service = gateway.connect()
    try:
        DbManageService(database_service).create_all()
        report = seed_books(database_service)
    finally:
        database_service.dispose()

    logger.info(
        "Data seeding completed: {} inserted, {} already present",
        len(report.inserted),
        len(report.skipped),
    )
    return report
