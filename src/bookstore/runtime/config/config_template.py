"""Loading ``config.yaml`` with environment placeholders."""

import os
import re
from pathlib import Path

import yaml
from loguru import logger
from pydantic_core import ValidationError

from src.bookstore.runtime.config.config_data import ConfigData
from src.bookstore.runtime.config.settings import EnvironmentVariables

# ${NAME}, ${NAME:-default} or ${NAME:?message}
_PLACEHOLDER = re.compile(r"\$\{(?P<name>[^}:]+)(?:(?P<op>:-|:\?)(?P<arg>[^}]*))?\}")


def _expand(match: re.Match[str]) -> str:
    name, op, arg = match.group("name", "op", "arg")
    value = os.getenv(name)
    if value is not None:
        return value
    if op == ":-":
        return arg
    if op == ":?":
        raise ValueError(f"Required environment variable {name}: {arg}")
    raise ValueError(f"Required environment variable {name} not set")


def substitute_env_vars(text: str) -> str:
    """Replace every ``${...}`` placeholder with its environment value.

    ``${NAME}`` must be set, ``${NAME:-default}`` falls back to ``default``
    and ``${NAME:?message}`` fails with ``message`` when unset.

    Raises:
        ValueError: a required variable is missing.
    """
    return _PLACEHOLDER.sub(_expand, text)


def load_templated_yaml(file_path: Path) -> ConfigData:
    """Read a configuration file whose settings sit under a top-level ``config`` key.

    Raises:
        ValueError: on a missing required variable, unparsable YAML, or
            settings that do not validate.
        FileNotFoundError: the file does not exist.
    """
    text = substitute_env_vars(Path(file_path).read_text())

    try:
        document = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ValueError(f"Error parsing YAML in {file_path}: {e}") from e
    if not isinstance(document, dict):
        raise ValueError(f"{file_path} does not contain a configuration mapping")

    try:
        return ConfigData.model_validate(document.get("config") or {})
    except ValidationError as e:
        raise ValueError(f"Invalid configuration in {file_path}: {e}") from e


def load_config(env: EnvironmentVariables | None = None) -> ConfigData:
    """Build the process configuration once at startup.

    The YAML file named by ``CONFIG_FILE`` wins when it exists; otherwise the
    configuration is assembled from plain environment variables.
    """
    env = env or EnvironmentVariables()
    config_path = Path(env.config_file)
    if config_path.exists():
        logger.info("Loading configuration from {}", config_path)
        return load_templated_yaml(config_path)

    logger.info("No configuration file at {}; using environment variables", config_path)
    return env.to_config()
