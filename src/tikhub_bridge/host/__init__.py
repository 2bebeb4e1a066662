"""Host runtime contract and an in-process host implementation."""

from tikhub_bridge.host.base import HostLogger, PluginAPI, ToolDefinition, ToolResult
from tikhub_bridge.host.dispatcher import (
    DuplicateToolError,
    ToolDispatcher,
    ToolExecutionError,
    ToolNotFoundError,
)
from tikhub_bridge.host.logger import StderrLogger

__all__ = [
    "DuplicateToolError",
    "HostLogger",
    "PluginAPI",
    "StderrLogger",
    "ToolDefinition",
    "ToolDispatcher",
    "ToolExecutionError",
    "ToolNotFoundError",
    "ToolResult",
]
