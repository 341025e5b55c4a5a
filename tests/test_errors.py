"""ErrorBase contract: message, tag, hint, abstract groups and the library errors."""

from __future__ import annotations

import pickle

import pytest

from fallible.errors import (
    ConfigurationError,
    ErrorBase,
    FallibleError,
    InvalidPayloadError,
)
from fallible.result import err
from tests.helpers import NotFoundError, ValidationError

pytestmark = pytest.mark.unit


def test_error_carries_message_tag_and_hint() -> None:
    e = ValidationError("bad input", hint="Send a non-empty key.")

    assert e.message == "bad input"
    assert str(e) == "bad input"
    assert e.tag == "validation"
    assert e.hint == "Send a non-empty key."


def test_hint_defaults_to_none() -> None:
    assert NotFoundError("gone").hint is None


def test_tags_distinguish_variants() -> None:
    assert NotFoundError.tag != ValidationError.tag
    assert ConfigurationError.tag == "configuration"
    assert InvalidPayloadError.tag == "invalid_payload"


def test_errors_are_platform_exceptions() -> None:
    """ErrorBase subclasses are raisable and catchable like any Exception."""
    with pytest.raises(ErrorBase):
        raise NotFoundError("gone")
    assert issubclass(ErrorBase, Exception)


@pytest.mark.parametrize("attr", ["message", "tag"])
def test_message_and_tag_are_read_only(attr: str) -> None:
    e = NotFoundError("gone")

    with pytest.raises(AttributeError):
        setattr(e, attr, "other")

    assert (e.message, e.tag) == ("gone", "not_found")


def test_concrete_variant_must_declare_a_tag() -> None:
    with pytest.raises(TypeError, match="tag"):

        class Untagged(ErrorBase):
            pass


def test_tag_is_not_inherited_from_a_concrete_parent() -> None:
    with pytest.raises(TypeError, match="tag"):

        class MoreSpecific(NotFoundError):
            pass


def test_tag_must_be_a_non_empty_string() -> None:
    with pytest.raises(TypeError):

        class Empty(ErrorBase):
            tag = ""

    with pytest.raises(TypeError):

        class Numeric(ErrorBase):
            tag = 3  # type: ignore[assignment]


def test_abstract_groups_need_no_tag_and_cannot_be_built() -> None:
    class DomainError(ErrorBase, abstract=True):
        pass

    class Conflict(DomainError):
        tag = "conflict"

    with pytest.raises(TypeError, match="abstract"):
        DomainError("nope")
    with pytest.raises(TypeError, match="abstract"):
        ErrorBase("nope")

    assert isinstance(Conflict("dup"), DomainError)


def test_library_errors_share_one_hierarchy() -> None:
    cfg = ConfigurationError("bad", hint="fix it")
    payload = InvalidPayloadError("not an error")

    assert isinstance(cfg, FallibleError)
    assert isinstance(payload, FallibleError)
    assert isinstance(payload, TypeError)
    with pytest.raises(TypeError, match="abstract"):
        FallibleError("nope")


def test_to_json_includes_hint_only_when_set() -> None:
    assert NotFoundError("gone").to_json() == {"tag": "not_found", "message": "gone"}
    assert ValidationError("bad", hint="h").to_json() == {
        "tag": "validation",
        "message": "bad",
        "hint": "h",
    }


def test_errors_survive_pickling() -> None:
    restored = pickle.loads(pickle.dumps(ValidationError("bad", hint="h")))

    assert type(restored) is ValidationError
    assert (restored.message, restored.tag, restored.hint) == ("bad", "validation", "h")


def test_message_is_fixed_at_construction() -> None:
    e = NotFoundError("failed")
    rendered = str(err(e))

    e.args = ("changed",)
    assert e.message == "failed"
    assert str(e) == "failed"

    e.args = ()
    assert e.message == "failed"
    assert str(err(e)) == rendered == "Err(failed)"


def test_private_message_slot_is_read_only() -> None:
    e = NotFoundError("failed")

    with pytest.raises(AttributeError):
        e._message = "changed"

    assert e.message == "failed"
