"""Result container: a success value or a typed failure.

A ``Result`` is in exactly one of two variants for its whole lifetime:

- ``Ok`` holds the success value (built with ``Result.ok`` / ``ok``).
- ``Err`` holds an ``ErrorBase`` instance (built with ``Result.err`` / ``err``).

Instances are immutable and the hierarchy is sealed: the two concrete
variants are private to this module. ``ok(v)`` is typed ``Result[T, Never]``
and ``err(e)`` is typed ``Result[Never, E]``; both parameters are covariant
so either variant widens to a shared ``Result[T, E]``.

``get_or_raise()`` is the single place where a failure value is turned back
into a raised exception. ``attempt()`` and ``catching()`` go the other way,
capturing raised ``ErrorBase`` errors as ``Err`` values.

Example:
    def parse_port(raw: str) -> Result[int, ValidationError]:
        if not raw.isdigit():
            return err(ValidationError(f"not a port: {raw!r}"))
        return ok(int(raw))

    parse_port("8080").map(lambda p: p + 1).get_or_default(80)  # 8081
"""

from __future__ import annotations

from abc import ABC, abstractmethod
import functools
import logging
from typing import (
    TYPE_CHECKING,
    Any,
    Generic,
    Never,
    NoReturn,
    ParamSpec,
    TypeVar,
    overload,
)

from pydantic_core import core_schema

from fallible.config import current_settings
from fallible.errors import ErrorBase, InvalidPayloadError

if TYPE_CHECKING:
    from collections.abc import Callable

    from pydantic import GetCoreSchemaHandler

log = logging.getLogger(__name__)

T = TypeVar("T")
U = TypeVar("U")
R = TypeVar("R")
E = TypeVar("E", bound=ErrorBase)
P = ParamSpec("P")
T_co = TypeVar("T_co", covariant=True)
E_co = TypeVar("E_co", bound=ErrorBase, covariant=True)


class Result(ABC, Generic[T_co, E_co]):
    """Outcome of an operation: ``Ok(value)`` or ``Err(error)``.

    Prefer the narrow accessors (``get_or_none``, ``err_or_none``,
    ``get_or_default``, ``get_or_else``, ``fold``) over the raw ``value``.
    """

    __slots__ = ("_value",)

    _value: Any

    def __init__(self, value: Any) -> None:
        object.__setattr__(self, "_value", value)

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        if cls.__module__ != __name__:
            raise TypeError(
                "Result is sealed; build instances with Result.ok() or Result.err()"
            )

    # --- Factories ---

    @staticmethod
    def ok(value: T) -> Result[T, Never]:
        """Wrap a success value."""
        return _Ok(value)

    @staticmethod
    def err(error: E) -> Result[Never, E]:
        """Wrap a failure value.

        Never fails by default. With ``validate_payloads`` enabled, a payload
        that is not an ``ErrorBase`` is rejected with ``InvalidPayloadError``.
        Setting ``FALLIBLE_VALIDATE=1`` in the process environment enables
        this for every caller in the process, not only the current library;
        prefer ``settings_scope(validate_payloads=True)`` to limit it.
        """
        if not isinstance(error, ErrorBase) and current_settings().validate_payloads:
            log.debug("err() rejected payload of type %s", type(error).__name__)
            raise InvalidPayloadError(
                f"err() expects an ErrorBase instance, got {type(error).__name__}",
                hint="Subclass fallible.ErrorBase and declare a 'tag'.",
            )
        return _Err(error)

    # --- Inspection ---

    @property
    @abstractmethod
    def is_ok(self) -> bool:
        """True iff this is an Ok."""

    @property
    @abstractmethod
    def is_err(self) -> bool:
        """True iff this is an Err."""

    @property
    def value(self) -> T_co | E_co:
        """The raw payload: the success value on Ok, the error on Err.

        Check ``is_ok``/``is_err`` before interpreting it.
        """
        return self._value

    # --- Extraction ---

    @abstractmethod
    def get_or_default(self, default: U) -> T_co | U:
        """Return the success value, or ``default`` on Err."""

    @abstractmethod
    def get_or_else(self, on_err: Callable[[E_co], U]) -> T_co | U:
        """Return the success value, or ``on_err(error)`` on Err.

        ``on_err`` is never called on Ok.
        """

    @abstractmethod
    def get_or_none(self) -> T_co | None:
        """Return the success value, or None on Err."""

    @abstractmethod
    def err_or_none(self) -> E_co | None:
        """Return the error, or None on Ok."""

    @abstractmethod
    def get_or_raise(self) -> T_co:
        """Return the success value, or raise the contained error on Err.

        This is the one deliberate bridge back to exception propagation.
        """

    # --- Combinators ---

    @abstractmethod
    def map(self, fn: Callable[[T_co], U]) -> Result[U, E_co]:
        """Transform the success value; an Err passes through unchanged."""

    @abstractmethod
    def fold(self, if_ok: Callable[[T_co], R], if_err: Callable[[E_co], R]) -> R:
        """Eliminate the result: exactly one of the two functions is called."""

    # --- Serialization & dunders ---

    def to_json(self) -> dict[str, Any]:
        """Return the shallow interchange record ``{value, isOk, isErr}``."""
        return {"value": self._value, "isOk": self.is_ok, "isErr": self.is_err}

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __delattr__(self, name: str) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Result):
            return NotImplemented
        return type(self) is type(other) and bool(self._value == other._value)

    def __hash__(self) -> int:
        return hash((self.is_ok, self._value))

    @classmethod
    def __get_pydantic_core_schema__(
        cls, source_type: Any, handler: GetCoreSchemaHandler
    ) -> core_schema.CoreSchema:
        """Accept Result instances in pydantic models; dump via ``to_jsonable``."""
        del source_type, handler
        from fallible.serialization import to_jsonable

        return core_schema.is_instance_schema(
            Result,
            serialization=core_schema.plain_serializer_function_ser_schema(
                to_jsonable, info_arg=False
            ),
        )


class _Ok(Result[T_co, Never]):
    __slots__ = ()

    @property
    def is_ok(self) -> bool:
        return True

    @property
    def is_err(self) -> bool:
        return False

    def get_or_default(self, default: U) -> T_co:
        return self._value

    def get_or_else(self, on_err: Callable[[Never], U]) -> T_co:
        return self._value

    def get_or_none(self) -> T_co:
        return self._value

    def err_or_none(self) -> None:
        return None

    def get_or_raise(self) -> T_co:
        return self._value

    def map(self, fn: Callable[[T_co], U]) -> Result[U, Never]:
        return _Ok(fn(self._value))

    def fold(self, if_ok: Callable[[T_co], R], if_err: Callable[[Never], R]) -> R:
        return if_ok(self._value)

    def __str__(self) -> str:
        return f"Ok({self._value})"

    def __repr__(self) -> str:
        return f"Ok({self._value!r})"

    def __reduce__(self) -> tuple[Any, ...]:
        return (Result.ok, (self._value,))


class _Err(Result[Never, E_co]):
    __slots__ = ()

    @property
    def is_ok(self) -> bool:
        return False

    @property
    def is_err(self) -> bool:
        return True

    def get_or_default(self, default: U) -> U:
        return default

    def get_or_else(self, on_err: Callable[[E_co], U]) -> U:
        return on_err(self._value)

    def get_or_none(self) -> None:
        return None

    def err_or_none(self) -> E_co:
        return self._value

    def get_or_raise(self) -> NoReturn:
        error = self._value
        level = logging.WARNING if current_settings().trace_raises else logging.DEBUG
        log.log(
            level,
            "get_or_raise() on Err; raising %s: %s",
            getattr(error, "tag", type(error).__name__),
            _message_of(error),
        )
        if not isinstance(error, BaseException):
            raise InvalidPayloadError(
                f"Cannot raise non-exception error payload {error!r}",
                hint="Wrap failures in an ErrorBase subclass.",
            )
        raise error

    def map(self, fn: Callable[[Never], U]) -> Result[U, E_co]:
        return _Err(self._value)

    def fold(self, if_ok: Callable[[Never], R], if_err: Callable[[E_co], R]) -> R:
        return if_err(self._value)

    def __str__(self) -> str:
        return f"Err({_message_of(self._value)})"

    def __repr__(self) -> str:
        return f"Err({self._value!r})"

    def __reduce__(self) -> tuple[Any, ...]:
        return (_Err, (self._value,))


def _message_of(error: object) -> str:
    message = getattr(error, "message", None)
    return message if isinstance(message, str) else str(error)


ok = Result.ok
err = Result.err


# --- Bridges from exception-raising code ---


def _catch_types(
    catch: type[ErrorBase] | tuple[type[ErrorBase], ...],
) -> tuple[type[ErrorBase], ...]:
    types = catch if isinstance(catch, tuple) else (catch,)
    for t in types:
        if not (isinstance(t, type) and issubclass(t, ErrorBase)):
            raise InvalidPayloadError(
                f"Only ErrorBase subclasses can be captured as Err, got {t!r}",
                hint="Other exceptions propagate; convert them to an ErrorBase first.",
            )
    return types


@overload
def attempt(fn: Callable[[], T]) -> Result[T, ErrorBase]: ...


@overload
def attempt(
    fn: Callable[[], T], *, catch: type[E] | tuple[type[E], ...]
) -> Result[T, E]: ...


def attempt(
    fn: Callable[[], Any],
    *,
    catch: type[ErrorBase] | tuple[type[ErrorBase], ...] = ErrorBase,
) -> Result[Any, Any]:
    """Call ``fn`` and capture its outcome.

    The return value becomes ``Ok``; a raised exception matching ``catch``
    becomes ``Err``. Any other exception propagates.

    Example:
        attempt(lambda: load(path), catch=NotFoundError)
    """
    types = _catch_types(catch)
    try:
        value = fn()
    except types as exc:
        log.debug("attempt() captured %s: %s", exc.tag, exc.message)
        return Result.err(exc)
    return Result.ok(value)


@overload
def catching() -> Callable[[Callable[P, T]], Callable[P, Result[T, ErrorBase]]]: ...


@overload
def catching(
    first: type[E], /, *rest: type[E]
) -> Callable[[Callable[P, T]], Callable[P, Result[T, E]]]: ...


def catching(
    *error_types: type[ErrorBase],
) -> Callable[[Callable[P, T]], Callable[P, Result[T, Any]]]:
    """Decorate a function so it returns a Result instead of raising.

    With no arguments every ``ErrorBase`` is captured and the error side is
    typed ``ErrorBase``.

    Example:
        @catching(NotFoundError, ValidationError)
        def load_user(user_id: str) -> User: ...
    """
    types = _catch_types(error_types or ErrorBase)

    def decorate(fn: Callable[P, T]) -> Callable[P, Result[T, Any]]:
        @functools.wraps(fn)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> Result[T, Any]:
            try:
                value = fn(*args, **kwargs)
            except types as exc:
                return Result.err(exc)
            return Result.ok(value)

        return wrapper

    return decorate


__all__ = ["Result", "attempt", "catching", "err", "ok"]
