"""Two-tool registration: list tools, then call one by name.

For hosts that require registration to finish synchronously. Nothing is
fetched at registration time; the catalog is discovered the first time
either tool runs.
"""

from __future__ import annotations

from typing import Any

from tikhub_bridge.adapters.executor import guarded_handler, invoke_remote
from tikhub_bridge.audit import AuditLogger
from tikhub_bridge.catalog import ToolCatalog
from tikhub_bridge.categories import KNOWN_PREFIXES
from tikhub_bridge.client import TikHubClient
from tikhub_bridge.config import DEFAULT_TOOL_PREFIX
from tikhub_bridge.host.base import PluginAPI, ToolDefinition

LIST_TOOL = "list_tools"
CALL_TOOL = "call_tool"

LIST_PARAMETERS: dict[str, Any] = {
    "type": "object",
    "properties": {
        "category": {
            "type": "string",
            "description": "Platform category to list, e.g. " + ", ".join(KNOWN_PREFIXES[:6]),
        },
    },
}

CALL_PARAMETERS: dict[str, Any] = {
    "type": "object",
    "properties": {
        "tool_name": {
            "type": "string",
            "minLength": 1,
            "description": "TikHub tool name, e.g. xiaohongshu_web_search_notes",
        },
        "arguments": {
            "type": "object",
            "description": "Parameters for the tool",
            "additionalProperties": True,
        },
    },
    "required": ["tool_name"],
}


def build_generic_tools(
    api: PluginAPI,
    client: TikHubClient,
    catalog: ToolCatalog,
    prefix: str = DEFAULT_TOOL_PREFIX,
    audit: AuditLogger | None = None,
) -> list[ToolDefinition]:
    """Build the list and call tool definitions.

    Parameters are validated against ``LIST_PARAMETERS`` and
    ``CALL_PARAMETERS`` before either handler runs.

    Args:
        api: Host plugin API.
        client: TikHub API client.
        catalog: Lazily discovered tool catalog.
        prefix: Namespace prefix for host tool names.
        audit: Optional audit trail.

    Returns:
        List containing the list tool and the call tool definitions.
    """
    list_name = f"{prefix}{LIST_TOOL}"
    call_name = f"{prefix}{CALL_TOOL}"

    async def list_tools(params: dict[str, Any]) -> Any:
        category = params.get("category") or None
        return await catalog.summarize(category, call_tool_name=call_name)

    async def call_tool(params: dict[str, Any]) -> Any:
        arguments = params.get("arguments") or {}
        return await invoke_remote(client, params["tool_name"], arguments, api.log, audit)

    return [
        ToolDefinition(
            name=list_name,
            description=(
                "List the available TikHub social media data tools "
                "(Xiaohongshu, TikTok, Douyin, Instagram, YouTube, Twitter/X, Weibo and more), "
                "grouped by platform. Optionally filter by category."
            ),
            parameters=LIST_PARAMETERS,
            handler=guarded_handler(list_tools, api.log, list_name, schema=LIST_PARAMETERS),
        ),
        ToolDefinition(
            name=call_name,
            description=(
                f"Call a TikHub tool by name. Use {list_name} first to find the tool name."
            ),
            parameters=CALL_PARAMETERS,
            handler=guarded_handler(call_tool, api.log, call_name, schema=CALL_PARAMETERS),
        ),
    ]


def register_generic_tools(
    api: PluginAPI,
    client: TikHubClient,
    catalog: ToolCatalog,
    prefix: str = DEFAULT_TOOL_PREFIX,
    audit: AuditLogger | None = None,
) -> list[str]:
    """Register the list and call tools with the host.

    Returns:
        Registered host tool names.
    """
    registered = []
    for definition in build_generic_tools(api, client, catalog, prefix, audit):
        api.register_tool(definition)
        registered.append(definition.name)
    return registered
