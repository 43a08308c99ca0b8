from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar, Token
from dataclasses import dataclass, replace
from typing import Any

from pydantic import BaseModel

from src.bookstore.runtime.config.config_data import ConfigData
from src.bookstore.runtime.config.config_template import load_config


@dataclass
class AppContext:
    """Process-wide state shared by the services and jobs."""

    config: ConfigData


# Populated lazily on first access
_app_context: ContextVar[AppContext] = ContextVar("app_context")


def get_context() -> AppContext:
    """Return the current application context.

    The first call in a process loads the configuration (see
    :func:`load_config`) and installs it as the default.
    """
    try:
        return _app_context.get()
    except LookupError:
        context = AppContext(config=load_config())
        _app_context.set(context)
        return context


def set_context(context: AppContext) -> Token[AppContext]:
    return _app_context.set(context)


def _explicit_fields(model: BaseModel) -> dict[str, Any]:
    """Dump the fields of ``model`` that were set explicitly, at any depth.

    A nested model counts as set when any field beneath it was set; it is
    then dumped whole so that the override replaces it field by field.
    """
    explicit: dict[str, Any] = {}
    for name in type(model).model_fields:
        value = getattr(model, name)
        if isinstance(value, BaseModel):
            if name in model.model_fields_set or _explicit_fields(value):
                explicit[name] = value.model_dump()
        elif name in model.model_fields_set:
            explicit[name] = (
                {k: v.model_dump() if isinstance(v, BaseModel) else v for k, v in value.items()}
                if isinstance(value, dict)
                else value
            )
    return explicit


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    merged = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = _deep_merge(current, value)
        else:
            merged[key] = value
    return merged


def _merge_configs(base_config: ConfigData, override_config: ConfigData) -> ConfigData:
    """Layer the explicitly set parts of ``override_config`` over ``base_config``."""
    merged = _deep_merge(base_config.model_dump(), _explicit_fields(override_config))
    return ConfigData.model_validate(merged)


@contextmanager
def with_context(config_override: ConfigData | None = None) -> Iterator[None]:
    """Temporarily run with ``config_override`` merged into the current config.

    Example:
        override = ConfigData()
        override.gateway.read_service_url = "http://localhost:9000"
        with with_context(override):
            assert get_config().gateway.read_service_url == "http://localhost:9000"
    """
    if config_override is None:
        yield
        return

    if not isinstance(config_override, ConfigData):
        raise ValueError(
            f"config_override must be ConfigData or None, got {type(config_override)}"
        )

    current = get_context()
    token = set_context(
        replace(current, config=_merge_configs(current.config, config_override))
    )
    try:
        yield
    finally:
        _app_context.reset(token)


def set_config(config: ConfigData) -> None:
    """Replace the whole configuration of the current context."""
    set_context(replace(get_context(), config=config))


def get_config() -> ConfigData:
    return get_context().config
