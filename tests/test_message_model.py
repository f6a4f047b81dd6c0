"""Unit tests for message validation rules."""

import pytest

from shoutbox.core.message import MessageCreate, ValidationError, describe_errors


def test_valid_candidate_is_trimmed():
    """Surrounding whitespace is not part of the message."""
    candidate = MessageCreate.from_payload({"username": "  alice ", "content": " hi\n"})

    assert candidate.username == "alice"
    assert candidate.content == "hi"


def test_required_reasons():
    """Missing, null and empty fields all read as required."""
    with pytest.raises(ValidationError) as exc_info:
        MessageCreate.from_payload({"username": None})

    assert exc_info.value.errors == {
        "username": "The username field is required.",
        "content": "The content field is required.",
    }


def test_max_length_reasons():
    """Oversized fields cite their limit."""
    with pytest.raises(ValidationError) as exc_info:
        MessageCreate.from_payload({"username": "a" * 21, "content": "b" * 121})

    assert exc_info.value.errors == {
        "username": "The username field must not be greater than 20 characters.",
        "content": "The content field must not be greater than 120 characters.",
    }


def test_non_string_reason():
    """Numbers are not coerced into text."""
    with pytest.raises(ValidationError) as exc_info:
        MessageCreate.from_payload({"username": "alice", "content": 12})

    assert exc_info.value.errors == {"content": "The content field must be a string."}


def test_non_object_payload():
    """Only JSON objects are candidates."""
    with pytest.raises(ValidationError) as exc_info:
        MessageCreate.from_payload("alice: hi")

    assert list(exc_info.value.errors) == ["body"]


def test_describe_errors_keeps_first_reason_per_field():
    """A field is reported once even if several rules fail."""
    described = describe_errors(
        [
            {"loc": ("body", "username"), "type": "missing"},
            {"loc": ("body", "username"), "type": "string_type"},
        ]
    )

    assert described == {"username": "The username field is required."}
