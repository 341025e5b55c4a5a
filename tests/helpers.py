"""Test helpers (small, reusable doubles).

Concrete error variants and a call recorder shared across suites.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, ClassVar, Literal

from fallible import ErrorBase


class NotFoundError(ErrorBase):
    """A lookup found nothing."""

    tag: ClassVar[Literal["not_found"]] = "not_found"


class ValidationError(ErrorBase):
    """Input was rejected."""

    tag: ClassVar[Literal["validation"]] = "validation"


@dataclass
class Recorder:
    """Callable double that records its arguments and returns a fixed value."""

    returns: Any = None
    calls: list[Any] = field(default_factory=list)

    def __call__(self, arg: Any) -> Any:
        self.calls.append(arg)
        return self.returns

    @property
    def count(self) -> int:
        return len(self.calls)
