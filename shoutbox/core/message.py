"""
Define Message structure to ensure consistency in the system
"""

from datetime import datetime
from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field, ValidationError as PydanticValidationError, field_validator

USERNAME_MAX_LENGTH = 20
CONTENT_MAX_LENGTH = 120


class ValidationError(Exception):
    """
    Raised when a candidate message is rejected.
    Carries a mapping from field name to a human readable reason.
    """

    def __init__(self, errors: Dict[str, str]):
        super().__init__(", ".join(f"{field}: {reason}" for field, reason in errors.items()))
        self.errors = errors


class Message(BaseModel):
    """A persisted shoutbox message."""

    id: int
    username: str
    content: str
    created_at: datetime
    updated_at: datetime


class MessageCreate(BaseModel):
    """Candidate (username, content) pair submitted by a client."""

    model_config = ConfigDict(str_strip_whitespace=True)

    username: str = Field(min_length=1, max_length=USERNAME_MAX_LENGTH)
    content: str = Field(min_length=1, max_length=CONTENT_MAX_LENGTH)

    @field_validator("username", "content", mode="before")
    @classmethod
    def _require_strings(cls, value: Any) -> Any:
        # null counts as an empty field; numbers and booleans are never coerced
        if value is None:
            return ""
        if not isinstance(value, str):
            raise ValueError("not a string")
        return value

    @classmethod
    def from_payload(cls, payload: Any) -> "MessageCreate":
        """
        Validates a raw request payload.
        Raises ValidationError with one reason per failing field.
        """
        if not isinstance(payload, dict):
            raise ValidationError({"body": "The request body must be a JSON object."})

        try:
            return cls.model_validate(payload)
        except PydanticValidationError as e:
            raise ValidationError(describe_errors(e.errors())) from e


def describe_errors(errors: List[Dict[str, Any]]) -> Dict[str, str]:
    """Turns pydantic error entries into {field: reason}, first error per field wins."""
    described: Dict[str, str] = {}

    for error in errors:
        loc = error.get("loc") or ("body",)
        error_type = error.get("type", "")
        field = "body" if error_type == "json_invalid" else str(loc[-1])
        if field in described:
            continue
        described[field] = _reason(field, error_type, error.get("ctx") or {})

    return described


def _reason(field: str, error_type: str, ctx: Dict[str, Any]) -> str:
    if error_type in ("missing", "string_too_short"):
        return f"The {field} field is required."
    if error_type == "string_too_long":
        return f"The {field} field must not be greater than {ctx.get('max_length')} characters."
    if error_type in ("string_type", "value_error"):
        return f"The {field} field must be a string."
    if error_type in ("json_invalid", "model_attributes_type", "dict_type"):
        return "The request body must be a JSON object."
    return f"The {field} field is invalid."
