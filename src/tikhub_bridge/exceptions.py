"""Custom exceptions for the TikHub bridge.

Startup errors (configuration, initial discovery) are logged by the plugin
entry points. Per-call errors never leave a tool handler; they are turned
into ``{"success": False, "error": ...}`` payloads instead.
"""

from __future__ import annotations


class TikHubBridgeError(Exception):
    """Base exception for the TikHub bridge."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ConfigurationError(TikHubBridgeError):
    """Raised when configuration is invalid or missing."""

    pass


class RemoteError(TikHubBridgeError):
    """Raised when a TikHub API request fails or returns a non-2xx status."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        details: dict | None = None,
    ):
        super().__init__(message, details)
        self.status_code = status_code


class MalformedResponse(RemoteError):
    """Raised when a TikHub API response does not have the expected shape."""

    pass


class ValidationError(TikHubBridgeError):
    """Raised when tool arguments do not match the tool's parameter schema."""

    pass
