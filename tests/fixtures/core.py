from __future__ import annotations

from collections.abc import Generator
from pathlib import Path

import pytest
from sqlalchemy import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from src.bookstore.runtime.config.config_data import (
    AppConfig,
    ConfigData,
    DatabaseConfig,
    LoggingConfig,
    ServiceConfig,
    StartupPolicyConfig,
    default_services,
)

# Models will be imported within fixtures to control timing


def _quick_services() -> dict[str, ServiceConfig]:
    """Every profile keeps its mode but gives up after one immediate attempt."""
    return {
        name: ServiceConfig(
            port=service.port,
            startup=StartupPolicyConfig(
                mode=service.startup.mode, attempts=1, delay_seconds=0
            ),
        )
        for name, service in default_services().items()
    }


def make_config(database_url: str = "sqlite:///:memory:") -> ConfigData:
    """Build a test configuration around the given database URL."""
    return ConfigData(
        app=AppConfig(environment="test"),
        logging=LoggingConfig(level="DEBUG", format="plain", file=None),
        database=DatabaseConfig(url=database_url),
        services=_quick_services(),
    )


@pytest.fixture
def config() -> ConfigData:
    """Configuration backed by a private in-memory SQLite database."""
    return make_config()


@pytest.fixture
def database_path(tmp_path: Path) -> Path:
    return tmp_path / "books.db"


@pytest.fixture
def file_config(database_path: Path) -> ConfigData:
    """Configuration backed by a SQLite file, shared by every app in one test."""
    return make_config(f"sqlite:///{database_path}")


@pytest.fixture
def session() -> Generator[Session]:
    """Create a fresh database session for testing."""
    # Create a unique engine for each test to avoid cross-test leakage
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    # Import models to register them with the metadata
    from src.bookstore.entities.book import BookTable  # noqa: F401

    SQLModel.metadata.create_all(engine)

    with Session(engine) as session:
        yield session

    engine.dispose()
