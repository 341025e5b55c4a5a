"""Configuration: validated settings for development-time checks.

Settings resolve from layered sources with the precedence
defaults < ``.env`` file < process environment < overrides. The schema is a
frozen pydantic model, so a resolved ``Settings`` is the immutable runtime
payload as well.

Example:
    with settings_scope(validate_payloads=True):
        err("not an error")  # raises InvalidPayloadError
"""

from __future__ import annotations

from contextlib import contextmanager
import contextvars
from functools import cache
import logging
import os
from typing import TYPE_CHECKING, Any

from dotenv import dotenv_values
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from fallible.errors import ConfigurationError

if TYPE_CHECKING:
    from collections.abc import Generator, Mapping
    from pathlib import Path

    from fallible.result import Result

log = logging.getLogger(__name__)

# Field name -> environment variable
ENV_VARS: dict[str, str] = {
    "validate_payloads": "FALLIBLE_VALIDATE",
    "trace_raises": "FALLIBLE_TRACE_RAISES",
}


class Settings(BaseModel):
    """Schema, defaults and validation for fallible settings."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    #: Reject non-``ErrorBase`` payloads in ``err()``.
    validate_payloads: bool = Field(default=False)
    #: Log ``get_or_raise()`` on Err at WARNING instead of DEBUG.
    trace_raises: bool = Field(default=False)


_AMBIENT: contextvars.ContextVar[Settings | None] = contextvars.ContextVar(
    "fallible_settings", default=None
)


def _load_layer(values: Mapping[str, str | None]) -> dict[str, Any]:
    layer: dict[str, Any] = {}
    for field, env_key in ENV_VARS.items():
        raw = values.get(env_key)
        if raw is not None and raw.strip():
            layer[field] = raw.strip()
    return layer


def resolve_settings(
    overrides: Mapping[str, Any] | None = None,
    *,
    env_file: str | Path | None = None,
) -> Settings:
    """Resolve settings from all sources.

    Args:
        overrides: Programmatic values, highest precedence.
        env_file: Optional ``.env`` file. Its values are read, never exported
            into ``os.environ``.

    Raises:
        ConfigurationError: If any layer holds an invalid value.
    """
    merged: dict[str, Any] = {}
    if env_file is not None:
        merged.update(_load_layer(dotenv_values(env_file)))
    merged.update(_load_layer(os.environ))
    merged.update(overrides or {})
    return _validate(merged)


def _validate(merged: Mapping[str, Any]) -> Settings:
    try:
        return Settings.model_validate(merged)
    except ValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(p) for p in first.get("loc", ())) or "settings"
        env_key = ENV_VARS.get(field)
        hint = (
            f"Check {env_key} or the '{field}' override."
            if env_key
            else f"Known settings: {', '.join(sorted(ENV_VARS))}."
        )
        raise ConfigurationError(
            f"Invalid setting '{field}': {first.get('msg')}", hint=hint
        ) from e


def try_resolve_settings(
    overrides: Mapping[str, Any] | None = None,
    *,
    env_file: str | Path | None = None,
) -> Result[Settings, ConfigurationError]:
    """Like ``resolve_settings`` but returns the failure as a value."""
    from fallible.result import attempt

    return attempt(
        lambda: resolve_settings(overrides, env_file=env_file),
        catch=ConfigurationError,
    )


@cache
def _process_settings() -> Settings:
    try:
        return resolve_settings()
    except ConfigurationError as exc:
        log.warning("Ignoring invalid fallible environment settings: %s", exc)
        return Settings()


def reset_settings_cache() -> None:
    """Forget the settings resolved from the process environment."""
    _process_settings.cache_clear()


def current_settings() -> Settings:
    """Return the settings active in this context."""
    scoped = _AMBIENT.get()
    if scoped is not None:
        return scoped
    return _process_settings()


@contextmanager
def settings_scope(
    settings_or_overrides: Settings | Mapping[str, Any] | None = None,
    **overrides: Any,
) -> Generator[Settings]:
    """Install settings for the duration of a ``with`` block.

    Thread and async safe; the previous settings are restored on exit.

    Example:
        with settings_scope(trace_raises=True) as settings:
            ...
    """
    if isinstance(settings_or_overrides, Settings):
        settings = settings_or_overrides
        if overrides:
            settings = _validate({**settings.model_dump(), **overrides})
    else:
        settings = resolve_settings({**(settings_or_overrides or {}), **overrides})

    token = _AMBIENT.set(settings)
    try:
        yield settings
    finally:
        _AMBIENT.reset(token)


__all__ = [
    "ENV_VARS",
    "Settings",
    "current_settings",
    "reset_settings_cache",
    "resolve_settings",
    "settings_scope",
    "try_resolve_settings",
]
