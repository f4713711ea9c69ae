"""Async client for an OpenAI-compatible chat-completion endpoint."""

from __future__ import annotations

from collections.abc import Sequence
import json
import logging
import time
from typing import Any

import httpx

from .config import DEFAULT_API_KEY_ENV, DEFAULT_ENDPOINT
from .exceptions import ApexChatError, ApiError, ConfigError, NetworkError
from .message_store import Message
from .options import ModelChoice

LOGGER = logging.getLogger(__name__)

GENERIC_API_FAILURE = "API request failed"


class CompletionClient:
    """Send one non-streaming completion request per turn.

    There are no retries: a failure is raised once and the caller decides what
    to show.
    """

    def __init__(
        self,
        api_key: str,
        endpoint: str = DEFAULT_ENDPOINT,
        timeout: float | None = None,
        api_key_env: str = DEFAULT_API_KEY_ENV,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.api_key = (api_key or "").strip()
        self.endpoint = endpoint
        self.timeout = timeout
        self.api_key_env = api_key_env
        self._client = client

    @property
    def has_credential(self) -> bool:
        return bool(self.api_key)

    def require_credential(self) -> str:
        """Return the API key or raise ``ConfigError`` before any I/O."""
        if not self.api_key:
            LOGGER.error(
                "client.credential.missing",
                extra={"event": "client.credential.missing", "env": self.api_key_env},
            )
            raise ConfigError(
                f"API key is not configured; set the {self.api_key_env} "
                "environment variable."
            )
        return self.api_key

    def build_payload(
        self,
        history: Sequence[Message],
        new_message: Message,
        model: ModelChoice | str,
    ) -> dict[str, Any]:
        """Return the JSON body carrying the full history plus ``new_message``."""
        return {
            "model": ModelChoice.parse(model).value,
            "messages": [m.to_dict() for m in (*history, new_message)],
        }

    async def send(
        self,
        history: Sequence[Message],
        new_message: Message,
        model: ModelChoice | str,
    ) -> Message:
        """Post one turn and return the assistant reply."""
        api_key = self.require_credential()
        payload = self.build_payload(history, new_message, model)
        headers = {
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json",
        }

        started = time.perf_counter()
        LOGGER.info(
            "client.request.start",
            extra={
                "event": "client.request.start",
                "model": payload["model"],
                "message_count": len(payload["messages"]),
            },
        )
        try:
            response = await self._post(payload, headers)
        except Exception as exc:
            mapped = self._map_exception(exc)
            LOGGER.warning(
                "client.request.failed",
                extra={
                    "event": "client.request.failed",
                    "error_type": type(exc).__name__,
                    "error": str(mapped),
                },
            )
            raise mapped from exc

        message = self._parse_response(response)
        LOGGER.info(
            "client.request.complete",
            extra={
                "event": "client.request.complete",
                "status": response.status_code,
                "elapsed_ms": round((time.perf_counter() - started) * 1000),
            },
        )
        return message

    async def _post(
        self, payload: dict[str, Any], headers: dict[str, str]
    ) -> httpx.Response:
        kwargs: dict[str, Any] = {"json": payload, "headers": headers}
        if self.timeout is not None:
            kwargs["timeout"] = self.timeout
        if self._client is not None:
            return await self._client.post(self.endpoint, **kwargs)
        async with httpx.AsyncClient() as client:
            return await client.post(self.endpoint, **kwargs)

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        """Return ``error.message`` from an error body when the server sent one."""
        try:
            body = response.json()
        except (json.JSONDecodeError, UnicodeDecodeError):
            return GENERIC_API_FAILURE
        if isinstance(body, dict):
            error = body.get("error")
            if isinstance(error, dict):
                message = error.get("message")
                if isinstance(message, str) and message.strip():
                    return message.strip()
        return GENERIC_API_FAILURE

    @classmethod
    def _parse_response(cls, response: httpx.Response) -> Message:
        if not response.is_success:
            raise ApiError(cls._error_message(response), status_code=response.status_code)

        try:
            body = response.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise ApiError(
                "Malformed response: body is not JSON", status_code=response.status_code
            ) from exc

        choices = body.get("choices") if isinstance(body, dict) else None
        first = choices[0] if isinstance(choices, list) and choices else None
        message = first.get("message") if isinstance(first, dict) else None
        if not isinstance(message, dict):
            raise ApiError(
                "Malformed response: missing choices[0].message",
                status_code=response.status_code,
            )

        content = message.get("content")
        if not isinstance(content, str):
            raise ApiError(
                "Malformed response: message content is not text",
                status_code=response.status_code,
            )
        role = message.get("role", "assistant")
        if role != "assistant":
            raise ApiError(
                f"Malformed response: unexpected role {role!r}",
                status_code=response.status_code,
            )
        return Message(role="assistant", content=content)

    @staticmethod
    def _map_exception(exc: Exception) -> ApexChatError:
        if isinstance(exc, ApexChatError):
            return exc
        if isinstance(exc, httpx.TransportError):
            return NetworkError(f"Unable to reach the completion endpoint: {exc}")
        return ApiError(f"Request failed: {exc}")
