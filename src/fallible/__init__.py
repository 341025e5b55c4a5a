"""fallible: success-or-failure values with typed, exhaustive error handling.

Public API:
    - Result: the two-variant container, built with ok() / err()
    - ErrorBase: base class for failure values (message + tag)
    - attempt() / catching(): capture raised ErrorBase errors as Err values
    - dumps() / to_jsonable(): JSON projection of results
    - Settings / settings_scope(): development-time checks and tracing

Example:
    class NotFoundError(ErrorBase):
        tag: ClassVar[Literal["not_found"]] = "not_found"

    def find(key: str) -> Result[int, NotFoundError]:
        return ok(len(key)) if key else err(NotFoundError("empty key"))

    find("abc").fold(lambda n: f"ok:{n}", lambda e: f"err:{e.message}")
"""

from __future__ import annotations

import logging

from fallible.config import (
    Settings,
    current_settings,
    resolve_settings,
    settings_scope,
    try_resolve_settings,
)
from fallible.errors import (
    ConfigurationError,
    ErrorBase,
    FallibleError,
    InvalidPayloadError,
)
from fallible.result import Result, attempt, catching, err, ok
from fallible.serialization import dumps, to_jsonable

try:
    from importlib.metadata import PackageNotFoundError, version

    __version__ = version("fallible")
except PackageNotFoundError:
    __version__ = "0.0.0+unknown"

# Library-level NullHandler: stay silent unless the consumer configures logging.
logging.getLogger("fallible").addHandler(logging.NullHandler())

__all__ = [
    "ConfigurationError",
    "ErrorBase",
    "FallibleError",
    "InvalidPayloadError",
    "Result",
    "Settings",
    "attempt",
    "catching",
    "current_settings",
    "dumps",
    "err",
    "ok",
    "resolve_settings",
    "settings_scope",
    "to_jsonable",
    "try_resolve_settings",
]
