"""Process-wide configuration held in a context variable.

``config.yaml`` is loaded once at import. Code reads it through
``get_config()``; tests and tools swap it with ``with_context()`` or
``set_config()``.
"""

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar, Token
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

from pydantic import BaseModel

from src.pricebook.runtime.config.config_data import ConfigData
from src.pricebook.runtime.config.config_template import load_config
from src.pricebook.runtime.settings import EnvironmentVariables


@dataclass(frozen=True)
class AppContext:
    config: ConfigData


_app_context: ContextVar[AppContext] = ContextVar(
    "app_context",
    default=AppContext(config=load_config(Path(EnvironmentVariables().config_file))),
)


def get_context() -> AppContext:
    return _app_context.get()


def set_context(context: AppContext) -> Token[AppContext]:
    """Install ``context`` and return the token that restores the previous one."""
    return _app_context.set(context)


def _explicit_fields(model: BaseModel) -> dict[str, Any]:
    """Collect the fields of ``model`` that were set explicitly.

    A nested section counts as set when it was assigned itself or when any
    field inside it was; it is then taken whole.
    """
    explicit: dict[str, Any] = {}
    for name in type(model).model_fields:
        value = getattr(model, name)
        nested_set = isinstance(value, BaseModel) and bool(_explicit_fields(value))
        if name in model.model_fields_set or nested_set:
            explicit[name] = value.model_dump() if isinstance(value, BaseModel) else value
    return explicit


def _deep_merge(base: dict[str, Any], overlay: dict[str, Any]) -> dict[str, Any]:
    merged = dict(base)
    for key, value in overlay.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _overlay(base: ConfigData, override: ConfigData) -> ConfigData:
    return ConfigData.model_validate(_deep_merge(base.model_dump(), _explicit_fields(override)))


@contextmanager
def with_context(config_override: ConfigData | None = None) -> Iterator[None]:
    """Temporarily overlay ``config_override`` on the current configuration.

    Only fields set on the override change; everything else keeps its
    current value. ``None`` leaves the configuration untouched.

    Example:
        override = ConfigData()
        override.pricing.default_exchange_rate = 90000
        with with_context(override):
            assert get_config().pricing.default_exchange_rate == 90000
    """
    if config_override is None:
        yield
        return
    if not isinstance(config_override, ConfigData):
        raise ValueError(
            f"config_override must be ConfigData or None, got {type(config_override)}"
        )

    current = get_context()
    token = set_context(replace(current, config=_overlay(current.config, config_override)))
    try:
        yield
    finally:
        _app_context.reset(token)


def set_config(config: ConfigData) -> None:
    """Replace the configuration for the rest of the current context."""
    set_context(replace(get_context(), config=config))


def get_config() -> ConfigData:
    return get_context().config
