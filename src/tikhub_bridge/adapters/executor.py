"""Shared executor plumbing for registered tools.

Every handler the bridge registers goes through :func:`guarded_handler`,
so a failing remote call is reported to the caller as a
``{"success": False, "error": ...}`` payload and never raised to the host.
"""

from __future__ import annotations

import time
import uuid
from typing import Any, Awaitable, Callable

from tikhub_bridge.audit import AuditLogger, sanitize_arguments
from tikhub_bridge.client import TikHubClient
from tikhub_bridge.exceptions import ValidationError
from tikhub_bridge.host.base import HostLogger, ToolHandler, ToolResult
from tikhub_bridge.host.logger import LOG_PREFIX, log_debug
from tikhub_bridge.validation import validate_arguments

PayloadFunc = Callable[[dict[str, Any]], Awaitable[Any]]


def failure(message: str) -> dict[str, Any]:
    """Build the payload reported for a failed call."""
    return {"success": False, "error": message}


def unwrap_result(response: Any) -> Any:
    """Unwrap the TikHub result envelope.

    Args:
        response: Parsed body of a /tools/call response.

    Returns:
        ``{"success", "code", "message", "data"}`` when the body carries a
        ``result`` object, otherwise the body unchanged.
    """
    if isinstance(response, dict):
        envelope = response.get("result")
        if isinstance(envelope, dict):
            return {
                "success": True,
                "code": envelope.get("code"),
                "message": envelope.get("message"),
                "data": envelope.get("data"),
            }
    return response


async def invoke_remote(
    client: TikHubClient,
    tool_name: str,
    arguments: dict[str, Any] | None,
    log: HostLogger,
    audit: AuditLogger | None = None,
) -> Any:
    """Call a remote tool and unwrap its result.

    Args:
        client: TikHub API client.
        tool_name: Remote tool name.
        arguments: Tool arguments.
        log: Host logger.
        audit: Optional audit trail.

    Returns:
        Unwrapped result payload.

    Raises:
        RemoteError: If the call fails.
    """
    arguments = arguments or {}
    log.info(f"{LOG_PREFIX} Calling tool: {tool_name}")
    log_debug(log, f"{LOG_PREFIX} {tool_name} arguments: {sanitize_arguments(arguments)}")

    request_id = uuid.uuid4().hex
    if audit:
        audit.log_call(request_id, tool_name, arguments)

    start = time.perf_counter()
    try:
        response = await client.call_tool(tool_name, arguments)
    except Exception as e:
        if audit:
            duration_ms = (time.perf_counter() - start) * 1000
            audit.log_result(request_id, "error", duration_ms, error=str(e))
        raise

    if audit:
        audit.log_result(request_id, "success", (time.perf_counter() - start) * 1000)

    return unwrap_result(response)


def guarded_handler(
    func: PayloadFunc,
    log: HostLogger,
    label: str,
    schema: dict[str, Any] | None = None,
) -> ToolHandler:
    """Wrap a payload-producing coroutine as a host tool handler.

    Parameters are checked against ``schema`` before ``func`` runs; a
    mismatch is reported as a failure payload.

    Args:
        func: Coroutine function taking the call parameters and returning a payload.
        log: Host logger.
        label: Name used in failure log lines.
        schema: Optional JSON Schema for the call parameters.

    Returns:
        Handler that always resolves to a ToolResult.
    """

    async def handler(params: dict[str, Any]) -> ToolResult:
        params = {} if params is None else params
        try:
            if schema is not None:
                validate_arguments(label, schema, params)
            payload = await func(params)
        except ValidationError as e:
            log.warn(f"{LOG_PREFIX} {e.message}")
            return ToolResult.from_payload(failure(e.message), is_error=True)
        except Exception as e:
            message = str(e) or type(e).__name__
            log.error(f"{LOG_PREFIX} Tool {label} failed: {message}")
            return ToolResult.from_payload(failure(message), is_error=True)

        is_error = isinstance(payload, dict) and payload.get("success") is False
        return ToolResult.from_payload(payload, is_error=is_error)

    return handler
