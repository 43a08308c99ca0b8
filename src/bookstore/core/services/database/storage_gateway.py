"""Connection to the shared collection with bounded-retry startup."""

import time
from collections.abc import Callable

from loguru import logger
from sqlalchemy.exc import SQLAlchemyError

from src.bookstore.core.errors import StartupFailure
from src.bookstore.core.services.database.db_session import DbSessionService
from src.bookstore.runtime.config.config_data import (
    DatabaseConfig,
    StartupPolicyConfig,
)


class StorageGateway:
    """Produce a live handle to the collection, tolerating a store that is still starting.

    ``connect`` pings the store up to ``policy.attempts`` times with a fixed
    ``policy.delay_seconds`` between attempts. When every attempt fails the
    policy decides: ``fail_fast`` raises :class:`StartupFailure`, ``degrade``
    hands back the handle anyway so that the first operation surfaces the
    storage error.
    """

    def __init__(
        self,
        db_config: DatabaseConfig,
        policy: StartupPolicyConfig,
        *,
        sleep: Callable[[float], None] = time.sleep,
        service_factory: Callable[[DatabaseConfig], DbSessionService] = DbSessionService,
    ) -> None:
        self._db_config = db_config
        self._policy = policy
        self._sleep = sleep
        self._service_factory = service_factory

    @property
    def policy(self) -> StartupPolicyConfig:
        return self._policy

    def connect(self) -> DbSessionService:
        """Block until the store answers a ping or the attempt budget is spent.

        Raises:
            StartupFailure: when the policy is ``fail_fast`` and no attempt
                succeeded, or under any policy when the URL names no usable backend.
        """
        policy = self._policy
        try:
            service = self._service_factory(self._db_config)
        except (SQLAlchemyError, ImportError) as exc:
            message = f"Cannot create a database engine for the configured URL: {exc}"
            logger.error(message)
            raise StartupFailure(message, attempts=0) from exc

        if policy.initial_delay_seconds:
            logger.info(
                "Waiting {}s for the database to come up", policy.initial_delay_seconds
            )
            self._sleep(policy.initial_delay_seconds)

        last_error: Exception | None = None
        for attempt in range(1, policy.attempts + 1):
            try:
                service.ping()
            except SQLAlchemyError as exc:
                last_error = exc
                logger.warning(
                    "Failed to connect to the database (attempt {}/{}): {}",
                    attempt,
                    policy.attempts,
                    exc,
                )
                # Drop half-open connections before the next attempt
                service.dispose()
                if attempt < policy.attempts:
                    self._sleep(policy.delay_seconds)
                continue

            logger.info(
                "Connected to the database at {} (attempt {}/{})",
                service.safe_url,
                attempt,
                policy.attempts,
            )
            return service

        message = (
            f"Failed to connect to the database after {policy.attempts} attempts: "
            f"{last_error}"
        )
        if policy.mode == "fail_fast":
            logger.error(message)
            raise StartupFailure(message, attempts=policy.attempts)

        logger.warning("{}; continuing in degraded mode", message)
        return service
