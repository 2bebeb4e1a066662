"""Tool argument validation against each tool's parameter schema."""

from __future__ import annotations

from typing import Any

from jsonschema import Draft202012Validator
from jsonschema.exceptions import SchemaError

from tikhub_bridge.exceptions import ValidationError


def validate_arguments(tool_name: str, schema: dict[str, Any], arguments: Any) -> None:
    """Validate call parameters against a JSON Schema.

    Args:
        tool_name: Name of the tool (for error messages).
        schema: JSON Schema declared by the tool.
        arguments: Parameters supplied by the caller.

    Raises:
        ValidationError: If the parameters or the schema are invalid.
    """
    try:
        validator = Draft202012Validator(schema)
        error = next(iter(validator.iter_errors(arguments)), None)
    except SchemaError as e:
        raise ValidationError(f"Invalid schema for tool {tool_name}: {e.message}") from e

    if error is not None:
        path = ".".join(str(p) for p in error.path) if error.path else "root"
        raise ValidationError(
            f"Invalid arguments for {tool_name} at '{path}': {error.message}",
            details={"path": list(error.path)},
        )
