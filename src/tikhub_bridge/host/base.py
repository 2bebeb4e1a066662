"""Host runtime contract.

Defines what the bridge receives from a host plugin runtime and what it
hands back when registering tools.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Protocol


class HostLogger(Protocol):
    """Leveled logger supplied by the host."""

    def info(self, message: str) -> None: ...

    def warn(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...


@dataclass
class ToolResult:
    """Result of a tool execution in the host's presentation format.

    ``content`` carries a human-readable text rendering, ``details`` the
    structured payload.
    """

    content: list[dict[str, Any]]
    details: Any = None
    is_error: bool = False

    @classmethod
    def from_payload(cls, payload: Any, is_error: bool = False) -> ToolResult:
        """Wrap a JSON-serializable payload.

        Args:
            payload: Structured result returned by a handler.
            is_error: Whether the payload describes a failure.

        Returns:
            ToolResult with the payload rendered as indented JSON text.
        """
        text = json.dumps(payload, ensure_ascii=False, indent=2, default=str)
        return cls(content=[{"type": "text", "text": text}], details=payload, is_error=is_error)

    def to_dict(self) -> dict[str, Any]:
        """Convert to the host result format.

        Returns:
            Dictionary with content and details.
        """
        return {
            "content": self.content,
            "details": self.details,
            "isError": self.is_error,
        }


ToolHandler = Callable[[dict[str, Any]], Awaitable[ToolResult]]


@dataclass
class ToolDefinition:
    """Definition of a tool registered with the host."""

    name: str
    description: str
    parameters: dict[str, Any]
    handler: ToolHandler

    def to_dict(self) -> dict[str, Any]:
        """Convert to the host tool listing format.

        Returns:
            Dictionary with name, description and parameter schema.
        """
        return {
            "name": self.name,
            "description": self.description,
            "parameters": self.parameters,
        }


@dataclass
class PluginAPI:
    """Everything the host hands to the plugin at load time.

    ``register_tool`` is synchronous; the tools it receives execute
    asynchronously.
    """

    config: dict[str, Any]
    log: HostLogger
    register_tool: Callable[[ToolDefinition], None]
    metadata: dict[str, Any] = field(default_factory=dict)
