"""NotionClient - thin async transport for the Notion REST API."""

from __future__ import annotations

import logging
from typing import Any, Protocol

import httpx

from shipyard.config import DEFAULT_API_BASE, DEFAULT_NOTION_VERSION
from shipyard.logging import sanitize_for_log, truncate_output
from shipyard.notion.exceptions import NotionTransportError

logger = logging.getLogger(__name__)


class Transport(Protocol):
    """Request capability the engine depends on."""

    async def request(
        self,
        path: str,
        method: str = "GET",
        json: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Send one request and return the parsed JSON body."""
        ...


def is_error(data: dict[str, Any]) -> bool:
    """Whether a parsed response is a Notion error object."""
    return data.get("object") == "error"


def error_message(data: dict[str, Any]) -> str:
    """Human-readable message of a Notion error object."""
    message = data.get("message")
    if message:
        return str(message)
    code = data.get("code")
    return str(code) if code else "unknown error"


class NotionClient:
    """Async client for the Notion API.

    Every request carries the bearer credential and the Notion-Version
    header. Error responses are returned as parsed JSON (``object: "error"``)
    for the caller to interpret; only transport-level failures raise.
    """

    def __init__(
        self,
        token: str,
        base_url: str = DEFAULT_API_BASE,
        notion_version: str = DEFAULT_NOTION_VERSION,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize Notion client.

        Args:
            token: Notion integration token.
            base_url: API base URL (for testing).
            notion_version: Value of the Notion-Version header.
            timeout: Per-request timeout in seconds.
            transport: Optional httpx transport (for testing).
        """
        self.token = token
        self.base_url = base_url.rstrip("/")
        self.notion_version = notion_version
        self.timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @property
    def client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                headers={
                    "Authorization": f"Bearer {self.token}",
                    "Notion-Version": self.notion_version,
                    "Content-Type": "application/json",
                },
                timeout=self.timeout,
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def request(
        self,
        path: str,
        method: str = "GET",
        json: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Send a request and return the parsed JSON body.

        Args:
            path: API path, e.g. "/pages/<id>".
            method: HTTP method.
            json: Request body.
            params: Query parameters.

        Returns:
            Parsed JSON object, which may be a Notion error object.

        Raises:
            NotionTransportError: On network failure or a non-JSON body.
        """
        logger.debug("%s %s", method, path)
        try:
            response = await self.client.request(method, path, json=json, params=params)
        except httpx.HTTPError as e:
            message = sanitize_for_log(str(e))
            logger.error("Request %s %s failed: %s", method, path, message)
            raise NotionTransportError(f"{method} {path} failed: {message}") from e

        try:
            data = response.json()
        except ValueError as e:
            body = truncate_output(sanitize_for_log(response.text))
            raise NotionTransportError(
                f"{method} {path} returned non-JSON response ({response.status_code}): {body}"
            ) from e

        if not isinstance(data, dict):
            raise NotionTransportError(
                f"{method} {path} returned {type(data).__name__}, expected an object"
            )

        if is_error(data):
            logger.warning(
                "%s %s -> %s: %s", method, path, response.status_code, error_message(data)
            )
        return data
