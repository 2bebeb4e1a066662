"""Configuration management for the TikHub bridge.

Configuration arrives either as the flat dictionary a host runtime hands
to the plugin (camelCase keys such as ``apiToken``) or from a YAML file
loaded with :func:`load_config`. Both paths produce an immutable
:class:`PluginConfig`.
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

import yaml

from tikhub_bridge.exceptions import ConfigurationError

DEFAULT_BASE_URL = "https://mcp.tikhub.io"
DEFAULT_MAX_TOOLS = 100
DEFAULT_TIMEOUT = 30
DEFAULT_TOOL_PREFIX = "tikhub_"

REGISTRATION_GENERIC = "generic"
REGISTRATION_PER_TOOL = "per_tool"
REGISTRATION_MODES = (REGISTRATION_GENERIC, REGISTRATION_PER_TOOL)

TOKEN_ENV_VAR = "TIKHUB_API_TOKEN"

# Host key -> dataclass field
_KEY_ALIASES = {
    "apiToken": "api_token",
    "baseUrl": "base_url",
    "enabledCategories": "enabled_categories",
    "maxTools": "max_tools",
    "registrationMode": "registration_mode",
    "toolPrefix": "tool_prefix",
    "auditLogFile": "audit_log_file",
}


def expand_env_vars(value: Any) -> Any:
    """Expand environment variables in a string.

    Supports ${VAR_NAME} syntax. Unknown variables are left unchanged and
    non-string values are returned as-is.

    Args:
        value: Value potentially containing environment variable references.

    Returns:
        Value with known environment variables expanded.
    """
    if not isinstance(value, str):
        return value

    pattern = re.compile(r"\$\{([^}]+)\}")

    def replacer(match: re.Match[str]) -> str:
        env_value = os.environ.get(match.group(1))
        if env_value is not None:
            return env_value
        return match.group(0)

    return pattern.sub(replacer, value)


def _parse_categories(value: Any) -> tuple[str, ...]:
    """Normalize the enabled categories setting to an ordered tuple."""
    if value is None:
        return ()
    if isinstance(value, str):
        value = value.split(",")
    elif not isinstance(value, (list, tuple, set)):
        raise ConfigurationError(
            f"enabledCategories must be a list of strings, got {type(value).__name__}"
        )
    categories = []
    for item in value:
        item = str(expand_env_vars(item)).strip()
        if item and item not in categories:
            categories.append(item)
    return tuple(categories)


@dataclass(frozen=True)
class PluginConfig:
    """TikHub bridge configuration.

    Loaded once at plugin startup and never modified afterwards.
    """

    api_token: str = ""
    base_url: str = DEFAULT_BASE_URL
    enabled_categories: tuple[str, ...] = field(default_factory=tuple)
    max_tools: int = DEFAULT_MAX_TOOLS
    timeout: float = DEFAULT_TIMEOUT
    registration_mode: str = REGISTRATION_GENERIC
    tool_prefix: str = DEFAULT_TOOL_PREFIX
    audit_log_file: str = ""

    @classmethod
    def from_dict(cls, config: dict[str, Any] | None) -> PluginConfig:
        """Create a PluginConfig from a host configuration dictionary.

        Args:
            config: Dictionary with camelCase or snake_case keys.

        Returns:
            PluginConfig with defaults applied for missing keys.
        """
        raw = {}
        for key, value in (config or {}).items():
            raw[_KEY_ALIASES.get(key, key)] = value

        base_url = expand_env_vars(raw.get("base_url") or DEFAULT_BASE_URL)
        max_tools = raw.get("max_tools")

        return cls(
            api_token=expand_env_vars(raw.get("api_token") or ""),
            base_url=str(base_url).rstrip("/"),
            enabled_categories=_parse_categories(raw.get("enabled_categories")),
            max_tools=DEFAULT_MAX_TOOLS if max_tools is None else max_tools,
            timeout=raw.get("timeout") or DEFAULT_TIMEOUT,
            registration_mode=raw.get("registration_mode") or REGISTRATION_GENERIC,
            tool_prefix=(
                DEFAULT_TOOL_PREFIX if raw.get("tool_prefix") is None else raw["tool_prefix"]
            ),
            audit_log_file=expand_env_vars(raw.get("audit_log_file") or ""),
        )

    def validate(self) -> None:
        """Validate configuration.

        Raises:
            ConfigurationError: If a required value is missing or invalid.
        """
        if not isinstance(self.api_token, str):
            raise ConfigurationError(
                f"apiToken must be a string, got {type(self.api_token).__name__}"
            )

        if not self.api_token or self.api_token.startswith("${"):
            raise ConfigurationError(
                "apiToken is not configured. "
                f"Set {TOKEN_ENV_VAR} or configure apiToken for the plugin"
            )

        if isinstance(self.max_tools, bool) or not isinstance(self.max_tools, int):
            raise ConfigurationError(
                f"maxTools must be an integer, got {self.max_tools!r}",
                details={"max_tools": self.max_tools},
            )

        if self.registration_mode not in REGISTRATION_MODES:
            raise ConfigurationError(
                f"Unknown registrationMode: {self.registration_mode}",
                details={"allowed": list(REGISTRATION_MODES)},
            )


def load_config(config_path: Path) -> PluginConfig:
    """Load configuration from a YAML file.

    Falls back to the TIKHUB_API_TOKEN environment variable when the file
    does not provide a token. A missing file yields the defaults.

    Args:
        config_path: Path to the YAML configuration file.

    Returns:
        PluginConfig instance (not yet validated).

    Raises:
        ConfigurationError: If the file cannot be parsed.
    """
    raw_config: dict[str, Any] = {}
    if config_path.exists():
        try:
            with open(config_path, encoding="utf-8") as f:
                raw_config = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in {config_path}: {e}") from e

    if not isinstance(raw_config, dict):
        raise ConfigurationError(f"Configuration root must be a mapping: {config_path}")

    tikhub = raw_config.get("tikhub") or {}
    tools = raw_config.get("tools") or {}
    audit = raw_config.get("audit") or {}

    config = PluginConfig.from_dict(
        {
            "api_token": tikhub.get("api_token"),
            "base_url": tikhub.get("base_url"),
            "timeout": tikhub.get("timeout"),
            "enabled_categories": tools.get("enabled_categories"),
            "max_tools": tools.get("max_tools"),
            "registration_mode": tools.get("registration_mode"),
            "tool_prefix": tools.get("prefix"),
            "audit_log_file": audit.get("log_file"),
        }
    )

    token = config.api_token
    if not token or (isinstance(token, str) and token.startswith("${")):
        config = replace(config, api_token=os.environ.get(TOKEN_ENV_VAR, ""))

    return config
