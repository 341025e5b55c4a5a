"""JSON projection of results and error payloads.

``Result.to_json()`` is shallow: its ``value`` is the raw payload. The helpers
here apply each payload's own serialization rule recursively so the record
can be handed to ``json`` or logged.
"""

from __future__ import annotations

from collections.abc import Mapping
import dataclasses
import json
from typing import Any

from pydantic import BaseModel

from fallible.errors import ErrorBase
from fallible.result import Result


def to_jsonable(obj: Any) -> Any:
    """Convert ``obj`` into JSON-compatible data.

    - ``Result``: its ``{value, isOk, isErr}`` record, payload converted.
    - ``ErrorBase``: its own ``to_json()``.
    - Other exceptions: ``{"tag": <class name>, "message": str(exc)}``.
    - pydantic models: ``model_dump(mode="json")``.
    - Dataclass instances, mappings, lists and tuples: element-wise.

    Anything else is returned unchanged.
    """
    if isinstance(obj, Result):
        return {key: to_jsonable(value) for key, value in obj.to_json().items()}
    if isinstance(obj, ErrorBase):
        return obj.to_json()
    if isinstance(obj, BaseException):
        return {"tag": type(obj).__name__, "message": str(obj)}
    if isinstance(obj, BaseModel):
        return obj.model_dump(mode="json")
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return {f.name: to_jsonable(getattr(obj, f.name)) for f in dataclasses.fields(obj)}
    if isinstance(obj, Mapping):
        return {str(k): to_jsonable(v) for k, v in obj.items()}
    if isinstance(obj, list | tuple):
        return [to_jsonable(v) for v in obj]
    return obj


def dumps(obj: Any, **kwargs: Any) -> str:
    """Serialize ``obj`` to a JSON string; ``kwargs`` go to ``json.dumps``."""
    return json.dumps(to_jsonable(obj), **kwargs)


__all__ = ["dumps", "to_jsonable"]
