"""Registration adapters exposing the TikHub catalog to a host runtime."""

from tikhub_bridge.adapters.executor import guarded_handler, invoke_remote, unwrap_result
from tikhub_bridge.adapters.generic import (
    CALL_TOOL,
    LIST_TOOL,
    build_generic_tools,
    register_generic_tools,
)
from tikhub_bridge.adapters.proxy import build_proxy_tool, register_proxy_tools

__all__ = [
    "CALL_TOOL",
    "LIST_TOOL",
    "build_generic_tools",
    "build_proxy_tool",
    "guarded_handler",
    "invoke_remote",
    "register_generic_tools",
    "register_proxy_tools",
    "unwrap_result",
]
