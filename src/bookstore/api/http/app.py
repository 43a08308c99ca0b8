"""FastAPI application factory and setup."""

import asyncio
import time
import uuid
from contextlib import asynccontextmanager

from fastapi import APIRouter, FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException
from starlette.responses import JSONResponse

from src.bookstore.api.http.app_data import ApplicationDependencies
from src.bookstore.api.http.routers import books, gateway, health
from src.bookstore.api.http.services import Capability, ServiceProfile, get_profile
from src.bookstore.api.utils.app_startup import configure_logging
from src.bookstore.core.errors import StartupFailure
from src.bookstore.core.services import (
    BookService,
    DbManageService,
    DbSessionService,
    ReadServiceClient,
    StorageGateway,
)
from src.bookstore.runtime.config.config_data import ConfigData
from src.bookstore.runtime.context import get_config

_ROUTERS: dict[Capability, list[APIRouter]] = {
    Capability.CREATE: [books.create_router],
    Capability.READ: [books.read_router],
    Capability.UPDATE: [books.update_router],
    Capability.DELETE: [books.delete_router],
    Capability.AGGREGATE: [gateway.router],
}

# Route registration order, so books-api lists its routes predictably
_CAPABILITY_ORDER = (
    Capability.CREATE,
    Capability.READ,
    Capability.UPDATE,
    Capability.DELETE,
    Capability.AGGREGATE,
)


def _request_id(request: Request) -> str:
    return getattr(request.state, "request_id", None) or "-"


def _connect_storage(
    profile: ServiceProfile, config: ConfigData
) -> tuple[DbSessionService, DbManageService]:
    policy = config.service(profile.name).startup
    database_service = StorageGateway(config.database, policy).connect()
    schema = DbManageService(database_service)

    if policy.mode == "fail_fast":
        try:
            schema.create_all()
        except SQLAlchemyError as exc:
            database_service.dispose()
            raise StartupFailure(
                f"Failed to prepare the books collection: {exc}",
                attempts=policy.attempts,
            ) from exc
    elif not schema.ensure_collection():
        # Retried by the next request that touches storage
        logger.warning("Starting without the books collection")
    return database_service, schema


async def startup(app: FastAPI, profile: ServiceProfile, config: ConfigData) -> None:
    logger.info(
        "Starting service {} in {} environment", profile.name, config.app.environment
    )
    deps = ApplicationDependencies(config=config, profile=profile)

    if profile.needs_storage:
        # Blocks until the store answers or the startup policy gives up
        deps.database_service, deps.schema = await asyncio.to_thread(
            _connect_storage, profile, config
        )
        deps.book_service = BookService(deps.database_service)

    if Capability.AGGREGATE in profile.capabilities:
        deps.read_client = ReadServiceClient(
            config.gateway.read_service_url,
            timeout=config.gateway.timeout_seconds,
        )
        logger.info("Reading books from {}", deps.read_client.base_url)

    app.state.app_dependencies = deps


async def shutdown(app: FastAPI) -> None:
    logger.info("Shutting down application")
    app_dependencies: ApplicationDependencies | None = getattr(
        app.state, "app_dependencies", None
    )
    if app_dependencies is not None and app_dependencies.database_service is not None:
        app_dependencies.database_service.dispose()


def create_app(service: str, config: ConfigData | None = None) -> FastAPI:
    """Build the application of one deployable service profile.

    Args:
        service: Profile name, e.g. ``books-post`` or ``web-server``.
        config: Configuration to use; defaults to the current context's.

    Raises:
        ValueError: if ``service`` does not name a known profile.
    """
    profile = get_profile(service)
    config = config or get_config()
    configure_logging(config)

    # --- FastAPI app setup ---
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        await startup(app, profile, config)
        try:
            yield
        finally:
            await shutdown(app)

    is_production = config.app.environment == "production"
    app = FastAPI(
        title=f"bookstore {profile.name}",
        description=profile.description,
        lifespan=lifespan,
        docs_url=None if is_production else "/docs",
        redoc_url=None if is_production else "/redoc",
    )

    # --- CORS configuration ---
    cors = config.app.cors
    if cors.allow_credentials and "*" in cors.origins:
        raise RuntimeError("CORS misconfigured: cannot use '*' with allow_credentials")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors.origins,
        allow_credentials=cors.allow_credentials,
        allow_methods=cors.allow_methods,
        allow_headers=cors.allow_headers,
    )

    # --- Request logging middleware ---
    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        request.state.request_id = request_id

        xff = request.headers.get("x-forwarded-for")
        client_ip = (
            xff.split(",")[0].strip()
            if xff
            else request.client.host
            if request.client
            else "unknown"
        )

        base_ctx = {
            "request_id": request_id,
            "service": profile.name,
            "method": request.method,
            "path": request.url.path,
            "client_ip": client_ip,
            "user_agent": request.headers.get("user-agent", "unknown"),
        }

        start = time.perf_counter()

        # Everything that logs within this block inherits base_ctx
        with logger.contextualize(**base_ctx):
            try:
                logger.info("request.start")
                response = await call_next(request)
            except Exception as exc:
                duration_ms = (time.perf_counter() - start) * 1000
                logger.bind(
                    status_code=500,
                    duration_ms=round(duration_ms, 1),
                    error_type=type(exc).__name__,
                ).exception("request.error")
                return JSONResponse(
                    status_code=500,
                    content={"detail": "Internal Server Error", "request_id": request_id},
                    headers={"X-Request-ID": request_id},
                )

            duration_ms = (time.perf_counter() - start) * 1000
            logger.bind(
                status_code=response.status_code,
                duration_ms=round(duration_ms, 1),
            ).info("request.end")
            response.headers.setdefault("X-Request-ID", request_id)
            return response

    # --- Error translation ---
    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.detail, "request_id": _request_id(request)},
            headers=exc.headers,
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ):
        # Malformed bodies and wrong field types are client errors
        logger.bind(error_type=type(exc).__name__).info("request.validation_error")
        return JSONResponse(
            status_code=400,
            content={
                "detail": jsonable_encoder(exc.errors()),
                "request_id": _request_id(request),
            },
        )

    # --- Router registration ---
    app.include_router(health.router)
    for capability in _CAPABILITY_ORDER:
        if capability in profile.capabilities:
            for router in _ROUTERS[capability]:
                app.include_router(router)

    return app


__all__ = ["create_app", "startup", "shutdown"]
