"""
HTTP wrapper around the Message Store Service.
"""

import logging
from types import TracebackType
from typing import Any, Dict, List, Optional, Type

import httpx
from pydantic import ValidationError as PydanticValidationError

from shoutbox.core.message import Message, ValidationError

logger = logging.getLogger(__name__)


class ShoutboxAPIError(Exception):
    """Any failure that is not a validation rejection: network, server fault, malformed reply."""


class ShoutboxAPI:
    """List and Append over HTTP."""

    def __init__(self, base_url: str, timeout: float = 5.0, transport: Optional[httpx.AsyncBaseTransport] = None):
        self._client = httpx.AsyncClient(base_url=base_url.rstrip("/"), timeout=timeout, transport=transport)

    async def __aenter__(self) -> "ShoutboxAPI":
        return self

    async def __aexit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc: Optional[BaseException],
        tb: Optional[TracebackType],
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def list_messages(self) -> List[Message]:
        body = await self._request("GET", "/messages")
        data = body.get("data")
        if not isinstance(data, list):
            raise ShoutboxAPIError("Malformed list response")
        try:
            return [Message.model_validate(item) for item in data]
        except PydanticValidationError as e:
            raise ShoutboxAPIError(f"Malformed message in list response: {e}") from e

    async def append_message(self, username: str, content: str) -> Message:
        """
        Submits a new message.
        Raises ValidationError on 422, ShoutboxAPIError on anything else that isn't 201.
        """
        body = await self._request("POST", "/messages", json={"username": username, "content": content})
        try:
            return Message.model_validate(body.get("data"))
        except PydanticValidationError as e:
            raise ShoutboxAPIError(f"Malformed append response: {e}") from e

    async def _request(self, method: str, path: str, json: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        try:
            response = await self._client.request(method, path, json=json)
        except httpx.HTTPError as e:
            raise ShoutboxAPIError(f"{method} {path} failed: {e}") from e

        try:
            body = response.json()
        except ValueError as e:
            raise ShoutboxAPIError(f"{method} {path} returned non-JSON ({response.status_code})") from e

        if response.status_code == httpx.codes.UNPROCESSABLE_ENTITY and isinstance(body, dict):
            errors = body.get("errors")
            if isinstance(errors, dict):
                raise ValidationError({str(k): _first_reason(v) for k, v in errors.items()})

        if response.is_error or not isinstance(body, dict) or body.get("success") is not True:
            logger.debug("Unexpected reply to %s %s: %s %s", method, path, response.status_code, body)
            raise ShoutboxAPIError(f"{method} {path} failed with status {response.status_code}")

        return body


def _first_reason(value: Any) -> str:
    # Some backends report a list of reasons per field
    if isinstance(value, list):
        return str(value[0]) if value else ""
    return str(value)
