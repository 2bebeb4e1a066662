"""TikHub REST API client.

Async HTTP client for the two TikHub endpoints the bridge needs:
``GET /tools`` for discovery and ``POST /tools/call`` for invocation.
"""

from __future__ import annotations

from typing import Any

import httpx

from tikhub_bridge.config import DEFAULT_BASE_URL, DEFAULT_TIMEOUT
from tikhub_bridge.exceptions import MalformedResponse, RemoteError

TOOLS_PATH = "/tools"
CALL_PATH = "/tools/call"


class TikHubClient:
    """Async client for the TikHub tools API."""

    def __init__(
        self,
        api_token: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize TikHub client.

        Args:
            api_token: TikHub bearer token
            base_url: API base address, without trailing slash
            timeout: Request timeout in seconds
            transport: Optional httpx transport (used to stub the API)
        """
        self.api_token = api_token
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> TikHubClient:
        """Async context manager entry."""
        self._get_client()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Async context manager exit."""
        await self.close()

    def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=self.timeout,
                headers=self._get_headers(),
                transport=self._transport,
            )
        return self._client

    def _get_headers(self) -> dict:
        """Get request headers with authentication."""
        return {
            "Authorization": f"Bearer {self.api_token}",
            "Content-Type": "application/json",
        }

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def request(self, path: str, method: str = "GET", body: Any | None = None) -> Any:
        """Make an authenticated request and return the parsed JSON body.

        Args:
            path: API path relative to the base URL, e.g. "/tools"
            method: HTTP method
            body: Optional JSON-serializable request body

        Returns:
            Parsed JSON response

        Raises:
            RemoteError: On transport failure or a non-2xx status
            MalformedResponse: When the body is not valid JSON
        """
        client = self._get_client()
        url = f"{self.base_url}{path}"

        kwargs: dict[str, Any] = {}
        if body is not None:
            kwargs["json"] = body

        try:
            response = await client.request(method, url, **kwargs)
        except httpx.TimeoutException as e:
            raise RemoteError(
                f"TikHub API request timed out: {e}",
                status_code=408,
                details={"path": path},
            ) from e
        except httpx.RequestError as e:
            raise RemoteError(
                f"TikHub API request failed: {e}",
                details={"path": path, "error": str(e)},
            ) from e

        if not response.is_success:
            raise RemoteError(
                f"TikHub API error: {response.status_code} {response.reason_phrase}",
                status_code=response.status_code,
                details={"path": path},
            )

        try:
            return response.json()
        except ValueError as e:
            raise MalformedResponse(
                f"TikHub {path} returned invalid JSON",
                status_code=response.status_code,
                details={"path": path},
            ) from e

    async def fetch_tools(self) -> list[dict[str, Any]]:
        """Fetch the full tool catalog.

        Returns:
            List of tool descriptors ({"name", "description"}) in API order

        Raises:
            MalformedResponse: When the response is not a JSON array, or an
                entry is not an object with a non-empty string ``name``
        """
        data = await self.request(TOOLS_PATH)
        if not isinstance(data, list):
            raise MalformedResponse(
                f"TikHub {TOOLS_PATH} returned {type(data).__name__}, expected a list",
                details={"path": TOOLS_PATH},
            )
        for index, tool in enumerate(data):
            name = tool.get("name") if isinstance(tool, dict) else None
            if not isinstance(name, str) or not name:
                raise MalformedResponse(
                    f"TikHub {TOOLS_PATH} entry {index} has no tool name",
                    details={"path": TOOLS_PATH, "index": index},
                )
        return data

    async def call_tool(self, tool_name: str, arguments: dict[str, Any] | None = None) -> Any:
        """Invoke a remote tool.

        Args:
            tool_name: Remote tool name (without any host prefix)
            arguments: Tool arguments

        Returns:
            Parsed response body, usually ``{"result": {"code", "data", "message"}}``
        """
        return await self.request(
            CALL_PATH,
            method="POST",
            body={"tool_name": tool_name, "arguments": arguments or {}},
        )
