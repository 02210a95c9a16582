"""HTTP connection adapter built on ``httpx``."""

from __future__ import annotations

import json
import logging
from typing import Any, Optional

import httpx

from ..core.config import UpliftConfig
from ..core.exceptions import ConfigurationError, TransportError

logger = logging.getLogger(__name__)

# response bodies are truncated to this many characters in error messages
_ERROR_BODY_LIMIT = 500


class HttpConnection:
    """Bearer-token connection to an org's REST API.

    The underlying ``httpx.AsyncClient`` is created lazily and shared by
    every request until ``aclose()``.  Use as an async context manager to
    close it automatically.
    """

    def __init__(
        self,
        instance_url: str,
        access_token: str,
        timeout: float = 120.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        if not instance_url:
            raise ConfigurationError("instance_url is required")
        if not access_token:
            raise ConfigurationError("access_token is required")
        self._instance_url = instance_url.rstrip("/")
        self._access_token = access_token
        self._timeout = timeout
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    @classmethod
    def from_config(cls, config: UpliftConfig, **kwargs) -> HttpConnection:
        """Create a connection from ``config.instance_url`` / ``config.access_token``."""
        return cls(
            instance_url=config.instance_url or "",
            access_token=config.access_token or "",
            timeout=config.request_timeout,
            **kwargs,
        )

    @property
    def instance_url(self) -> str:
        return self._instance_url

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self._instance_url,
                headers={
                    "Authorization": f"Bearer {self._access_token}",
                    "Accept": "application/json",
                },
                timeout=self._timeout,
                transport=self._transport,
            )
        return self._client

    async def post_json(self, path: str, body: dict[str, Any]) -> Any:
        client = self._get_client()
        try:
            response = await client.post(path, json=body)
        except httpx.HTTPError as exc:
            raise TransportError(f"{type(exc).__name__}: {exc}") from exc

        if response.is_error:
            raise TransportError(
                f"HTTP {response.status_code}: {_error_detail(response)}",
                status_code=response.status_code,
            )

        try:
            return response.json()
        except ValueError as exc:
            raise TransportError(
                f"Response is not valid JSON: {exc}",
                status_code=response.status_code,
            ) from exc

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> HttpConnection:
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()


def _error_detail(response: httpx.Response) -> str:
    """Best-effort message from an error response.

    The REST API returns ``[{"errorCode": ..., "message": ...}]``; anything
    else is reported as truncated text.
    """
    try:
        payload = response.json()
    except ValueError:
        return response.text[:_ERROR_BODY_LIMIT] or response.reason_phrase

    if isinstance(payload, list) and payload and isinstance(payload[0], dict):
        payload = payload[0]
    if isinstance(payload, dict):
        code = payload.get("errorCode")
        message = payload.get("message")
        if message:
            return f"{code}: {message}" if code else str(message)
    return json.dumps(payload)[:_ERROR_BODY_LIMIT]
