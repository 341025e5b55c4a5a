"""Error base and exception hierarchy for fallible.

Every value carried in the failure channel of a ``Result`` is an
``ErrorBase``: an ordinary ``Exception`` (so ``get_or_raise()`` can raise it
and ``except`` clauses can catch it) that also exposes a ``tag`` discriminant
declared by its concrete class.
"""

from __future__ import annotations

from typing import Any, ClassVar, Literal

_FROZEN_ATTRS = frozenset({"message", "tag", "_message"})


class ErrorBase(Exception):
    """Base for all failure values.

    Concrete variants declare their own ``tag``, typed as a ``Literal`` so
    type checkers can narrow a union of variants on it::

        class NotFoundError(ErrorBase):
            tag: ClassVar[Literal["not_found"]] = "not_found"

    Grouping classes that are not variants themselves opt out with
    ``abstract=True`` and cannot be instantiated.
    """

    tag: ClassVar[str]
    _abstract: ClassVar[bool] = True
    _message: str

    def __init_subclass__(cls, *, abstract: bool = False, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        cls._abstract = abstract
        if abstract:
            return
        tag = cls.__dict__.get("tag")
        if not isinstance(tag, str) or not tag:
            raise TypeError(
                f"{cls.__name__} must declare a non-empty string 'tag' "
                "(or be declared with abstract=True)"
            )

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        if type(self)._abstract:
            raise TypeError(
                f"{type(self).__name__} is abstract; raise a concrete variant"
            )
        super().__init__(message)
        object.__setattr__(self, "_message", str(message))
        self.hint = hint

    @property
    def message(self) -> str:
        """The human-readable description given at construction."""
        return self._message

    def __str__(self) -> str:
        return self._message

    def __reduce__(self) -> tuple[Any, ...]:
        state = {k: v for k, v in self.__dict__.items() if k != "_message"}
        return (type(self), (self._message,), state)

    def __setattr__(self, name: str, value: Any) -> None:
        if name in _FROZEN_ATTRS:
            raise AttributeError(f"{type(self).__name__}.{name} is read-only")
        super().__setattr__(name, value)

    def to_json(self) -> dict[str, str]:
        """Return the JSON-compatible view of this error."""
        data = {"tag": self.tag, "message": self.message}
        if self.hint is not None:
            data["hint"] = self.hint
        return data


class FallibleError(ErrorBase, abstract=True):
    """Base for errors raised by fallible itself."""


class ConfigurationError(FallibleError):
    """Settings validation or resolution failed."""

    tag: ClassVar[Literal["configuration"]] = "configuration"


class InvalidPayloadError(FallibleError, TypeError):
    """A value that is not an ``ErrorBase`` was used as an error.

    Raised by ``err()`` in validation mode, by ``get_or_raise()`` when the
    payload cannot be raised, and by ``attempt()``/``catching()`` when asked
    to catch a non-``ErrorBase`` type.
    """

    tag: ClassVar[Literal["invalid_payload"]] = "invalid_payload"
