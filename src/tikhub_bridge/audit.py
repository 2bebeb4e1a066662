"""Audit trail for remote tool calls.

Appends one JSON line per call and per result when an audit log file is
configured. Values stored under credential-like keys are replaced with
``REDACTED`` at any depth, including inside lists such as
``{"items": [{"token": ...}]}``.
"""

from __future__ import annotations

import json
import re
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

REDACTED = "[REDACTED]"

# Matched anywhere in a key, case-insensitively: "X-Auth-Token", "sessionid", "apiKey".
# "author_id" and friends are social media arguments, not credentials.
SENSITIVE_KEY = re.compile(
    r"password|passwd|secret|api[_-]?key|token|auth(?!or)|cookie|credential|session",
    re.IGNORECASE,
)


def _redact(value: Any) -> Any:
    if isinstance(value, dict):
        return {
            key: REDACTED if SENSITIVE_KEY.search(str(key)) else _redact(item)
            for key, item in value.items()
        }
    if isinstance(value, (list, tuple)):
        return [_redact(item) for item in value]
    return value


def sanitize_arguments(arguments: dict[str, Any]) -> dict[str, Any]:
    """Return a copy of tool arguments that is safe to log.

    Args:
        arguments: Arguments as sent to the remote tool.

    Returns:
        Copy of ``arguments`` with credential-like values redacted in
        nested objects and lists.
    """
    return _redact(arguments)


def _utc_now() -> str:
    return datetime.now(UTC).strftime("%Y-%m-%dT%H:%M:%S.%fZ")


class AuditLogger:
    """Append-only audit logger with JSON Lines format.

    The log file is flushed after each write.
    """

    def __init__(self, log_path: Path) -> None:
        """Initialize the audit logger.

        Args:
            log_path: Path to the audit log file.
        """
        self._log_path = log_path
        self._log_path.parent.mkdir(parents=True, exist_ok=True)
        self._file = open(log_path, "a", encoding="utf-8")  # noqa: SIM115

    def _write_line(self, data: dict[str, Any]) -> None:
        """Write a JSON line to the log file and flush."""
        line = json.dumps(data, ensure_ascii=False, default=str)
        self._file.write(line + "\n")
        self._file.flush()

    def log_call(self, request_id: str, tool_name: str, arguments: dict[str, Any]) -> None:
        """Log an outgoing remote tool call.

        Args:
            request_id: Unique identifier for this call.
            tool_name: Remote tool name.
            arguments: Tool arguments (will be sanitized).
        """
        self._write_line(
            {
                "type": "call",
                "timestamp": _utc_now(),
                "request_id": request_id,
                "tool_name": tool_name,
                "arguments": sanitize_arguments(arguments),
            }
        )

    def log_result(
        self, request_id: str, status: str, duration_ms: float, error: str | None = None
    ) -> None:
        """Log the outcome of a remote tool call.

        Args:
            request_id: Call identifier to correlate with.
            status: Result status (success/error).
            duration_ms: Call duration in milliseconds.
            error: Error message for failed calls.
        """
        event: dict[str, Any] = {
            "type": "result",
            "timestamp": _utc_now(),
            "request_id": request_id,
            "result_status": status,
            "execution_time_ms": duration_ms,
        }
        if error is not None:
            event["error"] = error
        self._write_line(event)

    def close(self) -> None:
        """Close the log file."""
        if self._file and not self._file.closed:
            self._file.close()

    def __enter__(self) -> AuditLogger:
        """Context manager entry."""
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Context manager exit."""
        self.close()
