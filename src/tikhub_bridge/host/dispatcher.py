"""In-process host runtime - holds registered tools and routes calls to them."""

from __future__ import annotations

from typing import Any

from tikhub_bridge.host.base import HostLogger, PluginAPI, ToolDefinition, ToolResult
from tikhub_bridge.host.logger import StderrLogger


class ToolNotFoundError(Exception):
    """Raised when a tool is not found."""

    pass


class ToolExecutionError(Exception):
    """Raised when a tool fails to execute."""

    pass


class DuplicateToolError(Exception):
    """Raised when a tool name is registered twice."""

    pass


class ToolDispatcher:
    """Routes tool calls to registered tool handlers.

    Implements the host side of :class:`PluginAPI` so the bridge can be
    embedded in a plain asyncio program.
    """

    def __init__(self) -> None:
        """Initialize the dispatcher."""
        self._tools: dict[str, ToolDefinition] = {}

    def register_tool(self, tool: ToolDefinition) -> None:
        """Register a tool.

        Args:
            tool: Tool definition to register.

        Raises:
            DuplicateToolError: If a tool with the same name already exists.
        """
        if tool.name in self._tools:
            raise DuplicateToolError(f"Tool already registered: {tool.name}")
        self._tools[tool.name] = tool

    def api(self, config: dict[str, Any], log: HostLogger | None = None) -> PluginAPI:
        """Build the PluginAPI handed to a plugin entry point.

        Args:
            config: Plugin configuration dictionary.
            log: Host logger (defaults to a StderrLogger).

        Returns:
            PluginAPI bound to this dispatcher.
        """
        return PluginAPI(
            config=config,
            log=log or StderrLogger(),
            register_tool=self.register_tool,
        )

    def list_tools(self) -> list[dict[str, Any]]:
        """List all registered tools in registration order.

        Returns:
            List of tool definitions.
        """
        return [tool.to_dict() for tool in self._tools.values()]

    def tool_names(self) -> list[str]:
        """Return registered tool names in registration order."""
        return list(self._tools)

    async def call_tool(self, tool_name: str, arguments: dict[str, Any] | None = None) -> ToolResult:
        """Call a tool by name.

        Args:
            tool_name: Name of the tool to call.
            arguments: Arguments to pass to the tool.

        Returns:
            ToolResult from the tool execution.

        Raises:
            ToolNotFoundError: If the tool is not registered.
            ToolExecutionError: If the tool handler raises.
        """
        tool = self._tools.get(tool_name)
        if tool is None:
            raise ToolNotFoundError(f"Tool not found: {tool_name}")

        try:
            return await tool.handler(arguments or {})
        except Exception as e:
            raise ToolExecutionError(f"Tool '{tool_name}' execution failed") from e

    def get_tool_schema(self, tool_name: str) -> dict[str, Any] | None:
        """Get the parameter schema for a tool.

        Args:
            tool_name: Name of the tool.

        Returns:
            Parameter schema dict or None if tool not found.
        """
        tool = self._tools.get(tool_name)
        if tool is None:
            return None
        return tool.parameters
