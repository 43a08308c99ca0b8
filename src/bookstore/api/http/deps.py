"""FastAPI dependency implementations."""

from __future__ import annotations

from fastapi import HTTPException, Request

from src.bookstore.api.http.app_data import ApplicationDependencies
from src.bookstore.core.services import BookService, ReadServiceClient
from src.bookstore.runtime.config.config_data import ConfigData


def get_app_dependencies(request: Request) -> ApplicationDependencies:
    """Get the dependencies built at startup."""
    return request.app.state.app_dependencies


def get_app_config(request: Request) -> ConfigData:
    """Get the configuration the application was built with."""
    return get_app_dependencies(request).config


def get_book_service(request: Request) -> BookService:
    """Get the book record service, creating the collection if still missing."""
    app_deps = get_app_dependencies(request)
    if app_deps.book_service is None:
        raise HTTPException(status_code=503, detail="Storage is not configured")
    if app_deps.schema is not None:
        # A failure here surfaces as a storage error from the operation itself
        app_deps.schema.ensure_collection()
    return app_deps.book_service


def get_read_client(request: Request) -> ReadServiceClient:
    """Get the read service client instance."""
    client = get_app_dependencies(request).read_client
    if client is None:
        raise HTTPException(status_code=503, detail="Read service is not configured")
    return client
