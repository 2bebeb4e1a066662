"""Tool discovery and filtering.

Fetches the TikHub tool catalog once, narrows it by the configured
categories and tool cap, and keeps the result for the life of the process.
"""

from __future__ import annotations

import asyncio
from typing import Any, Sequence

from tikhub_bridge.categories import get_category, group_by_label
from tikhub_bridge.client import TikHubClient
from tikhub_bridge.config import DEFAULT_MAX_TOOLS


def filter_tools(
    tools: Sequence[dict[str, Any]],
    enabled_categories: Sequence[str],
    max_tools: int,
) -> list[dict[str, Any]]:
    """Filter a tool catalog.

    Category filtering runs first, then the count cap. Catalog order is
    preserved throughout.

    Args:
        tools: Tool descriptors in API order.
        enabled_categories: Categories or name prefixes to keep. Empty keeps all.
        max_tools: Maximum number of tools to keep. Zero or negative keeps all.

    Returns:
        Filtered list of tool descriptors.
    """
    filtered = list(tools)

    if enabled_categories:
        filtered = [
            tool
            for tool in filtered
            if any(
                get_category(tool["name"]) == enabled or tool["name"].startswith(enabled)
                for enabled in enabled_categories
            )
        ]

    if max_tools > 0 and len(filtered) > max_tools:
        filtered = filtered[:max_tools]

    return filtered


class ToolCatalog:
    """Lazily discovered, filtered tool catalog.

    The first successful :meth:`get_tools` call fetches and filters the
    catalog; later calls return the same list. Failed discoveries are not
    cached, so the next call tries again.
    """

    def __init__(
        self,
        client: TikHubClient,
        enabled_categories: Sequence[str] = (),
        max_tools: int = DEFAULT_MAX_TOOLS,
    ) -> None:
        """Initialize the catalog.

        Args:
            client: Client used for discovery.
            enabled_categories: Categories or name prefixes to keep.
            max_tools: Tool cap (zero or negative disables it).
        """
        self._client = client
        self._enabled_categories = tuple(enabled_categories)
        self._max_tools = max_tools
        self._tools: list[dict[str, Any]] | None = None
        self._total_discovered = 0
        self._lock = asyncio.Lock()

    @property
    def is_loaded(self) -> bool:
        """Whether discovery has completed."""
        return self._tools is not None

    @property
    def total_discovered(self) -> int:
        """Number of tools the API reported before filtering."""
        return self._total_discovered

    async def get_tools(self) -> list[dict[str, Any]]:
        """Return the filtered catalog, discovering it on first use.

        Concurrent first calls share one discovery request.

        Returns:
            Filtered tool descriptors.

        Raises:
            RemoteError: If discovery fails.
            MalformedResponse: If the API does not return a list.
        """
        if self._tools is not None:
            return self._tools

        async with self._lock:
            if self._tools is None:
                all_tools = await self._client.fetch_tools()
                self._total_discovered = len(all_tools)
                self._tools = filter_tools(
                    all_tools, self._enabled_categories, self._max_tools
                )

        return self._tools

    async def summarize(
        self, category: str | None = None, call_tool_name: str = "call_tool"
    ) -> dict[str, Any]:
        """Build the list-tools summary.

        Args:
            category: Optional exact category to narrow the listing to.
            call_tool_name: Host name of the call tool, used in the usage hint.

        Returns:
            Dictionary with total, tools grouped by label and a usage hint.
        """
        tools = await self.get_tools()
        if category:
            tools = [t for t in tools if get_category(t["name"]) == category]

        return {
            "total": len(tools),
            "tools": group_by_label(tools),
            "usage": (
                f"Call a tool with {call_tool_name}, passing tool_name (a name from this list) "
                "and arguments (an object of parameters for that tool)."
            ),
        }
