"""TikHub bridge - exposes TikHub social media data tools to a host plugin runtime."""

from tikhub_bridge.catalog import ToolCatalog, filter_tools
from tikhub_bridge.categories import CATEGORY_LABELS, get_category
from tikhub_bridge.client import TikHubClient
from tikhub_bridge.config import PluginConfig, load_config
from tikhub_bridge.exceptions import (
    ConfigurationError,
    MalformedResponse,
    RemoteError,
    TikHubBridgeError,
    ValidationError,
)
from tikhub_bridge.plugin import TikHubPlugin, register, setup

__version__ = "1.0.0"

__all__ = [
    "CATEGORY_LABELS",
    "ConfigurationError",
    "MalformedResponse",
    "PluginConfig",
    "RemoteError",
    "TikHubBridgeError",
    "TikHubClient",
    "TikHubPlugin",
    "ToolCatalog",
    "ValidationError",
    "filter_tools",
    "get_category",
    "load_config",
    "register",
    "setup",
]
