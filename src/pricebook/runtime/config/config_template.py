"""Render config.yaml: environment placeholders, per-environment overrides, validation."""

import os
import re
from pathlib import Path

import yaml
from loguru import logger
from pydantic_core import ValidationError

from src.pricebook.runtime.config.config_data import ConfigData
from src.pricebook.runtime.settings import EnvironmentVariables

# ${NAME}, ${NAME:-fallback} or ${NAME:?message}
_PLACEHOLDER = re.compile(r"\$\{(?P<name>[^}:]+)(?:(?P<op>:[-?])(?P<arg>[^}]*))?\}")


def substitute_env_vars(text: str) -> str:
    """Replace ``${...}`` placeholders in ``text`` with environment values.

    ``${NAME:-fallback}`` uses the fallback when NAME is unset;
    ``${NAME}`` and ``${NAME:?message}`` raise ValueError instead.
    """

    def resolve(match: re.Match) -> str:
        name, op, arg = match.group("name", "op", "arg")
        value = os.environ.get(name)
        if value is not None:
            return value
        if op == ":-":
            return arg
        if op == ":?":
            raise ValueError(f"Required environment variable {name}: {arg}")
        raise ValueError(f"Required environment variable {name} not set")

    return _PLACEHOLDER.sub(resolve, text)


def apply_environment_overrides(env_mode: str) -> None:
    """Promote ``<ENV>_``-prefixed variables to their unprefixed names.

    With ``APP_ENVIRONMENT=production``, ``PRODUCTION_DATABASE_URL`` becomes
    ``DATABASE_URL`` before the template is rendered.
    """
    prefix = f"{env_mode.upper()}_"
    overrides = {
        name.removeprefix(prefix): value
        for name, value in os.environ.items()
        if name.startswith(prefix)
    }
    if overrides:
        logger.info("Applying {} overrides: {}", env_mode, sorted(overrides))
    os.environ.update(overrides)


def load_templated_yaml(file_path: Path) -> ConfigData:
    """Render ``file_path`` against the environment and validate its ``config`` section.

    Raises:
        ValueError: A required variable is missing, the YAML is empty or
            malformed, or the values fail validation.
        FileNotFoundError: ``file_path`` does not exist.
    """
    env_mode = EnvironmentVariables().environment
    logger.info("Loading {} for environment {}", file_path, env_mode)
    apply_environment_overrides(env_mode)

    rendered = substitute_env_vars(file_path.read_text())
    try:
        document = yaml.safe_load(rendered)
    except yaml.YAMLError as e:
        raise ValueError(f"Error parsing YAML: {e}") from e
    if not document:
        raise ValueError(f"{file_path} is empty")

    try:
        return ConfigData.model_validate(document.get("config") or {})
    except ValidationError as e:
        raise ValueError(f"Invalid configuration: {e}") from e


def load_config(file_path: Path) -> ConfigData:
    """Load ``file_path`` if it exists, otherwise fall back to built-in defaults."""
    if not file_path.exists():
        logger.warning("{} not found; using default configuration", file_path)
        return ConfigData()
    return load_templated_yaml(file_path)
