"""Per-tool registration.

Registers one host tool for every remote tool in the filtered catalog.
Needs the catalog at load time, so it only works with hosts that allow
asynchronous plugin setup.
"""

from __future__ import annotations

from typing import Any

from tikhub_bridge.adapters.executor import guarded_handler, invoke_remote
from tikhub_bridge.audit import AuditLogger
from tikhub_bridge.catalog import ToolCatalog
from tikhub_bridge.client import TikHubClient
from tikhub_bridge.config import DEFAULT_TOOL_PREFIX
from tikhub_bridge.host.base import PluginAPI, ToolDefinition

# Remote tools accept arbitrary parameters; the API validates them.
OPEN_PARAMETERS: dict[str, Any] = {
    "type": "object",
    "description": (
        "Parameters passed to the TikHub API "
        "(see the tool description or the TikHub documentation)"
    ),
    "additionalProperties": True,
}


def build_proxy_tool(
    api: PluginAPI,
    client: TikHubClient,
    tool: dict[str, Any],
    prefix: str = DEFAULT_TOOL_PREFIX,
    audit: AuditLogger | None = None,
) -> ToolDefinition:
    """Build the host tool that proxies one remote tool.

    Args:
        api: Host plugin API.
        client: TikHub API client.
        tool: Remote tool descriptor.
        prefix: Namespace prefix for the host tool name.
        audit: Optional audit trail.

    Returns:
        ToolDefinition ready for registration.
    """
    remote_name = tool["name"]

    async def call(params: dict[str, Any]) -> Any:
        return await invoke_remote(client, remote_name, params, api.log, audit)

    return ToolDefinition(
        name=f"{prefix}{remote_name}",
        description=f"[TikHub] {tool.get('description', '')}",
        parameters=dict(OPEN_PARAMETERS),
        handler=guarded_handler(call, api.log, remote_name, schema=OPEN_PARAMETERS),
    )


async def register_proxy_tools(
    api: PluginAPI,
    client: TikHubClient,
    catalog: ToolCatalog,
    prefix: str = DEFAULT_TOOL_PREFIX,
    audit: AuditLogger | None = None,
) -> list[str]:
    """Discover the catalog and register one host tool per remote tool.

    Args:
        api: Host plugin API.
        client: TikHub API client.
        catalog: Tool catalog (discovered here if not yet loaded).
        prefix: Namespace prefix for host tool names.
        audit: Optional audit trail.

    Returns:
        Registered host tool names.

    Raises:
        RemoteError: If discovery fails.
    """
    registered = []
    for tool in await catalog.get_tools():
        definition = build_proxy_tool(api, client, tool, prefix, audit)
        api.register_tool(definition)
        registered.append(definition.name)
    return registered
