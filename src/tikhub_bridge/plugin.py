"""TikHub bridge plugin - host entry points.

Hosts that load plugins synchronously call :func:`register`; hosts that
await plugin setup call :func:`setup`. Both read the configuration the
host supplies, log and give up on configuration errors, and register the
TikHub tools through ``api.register_tool``.

Example:

    dispatcher = ToolDispatcher()
    register(dispatcher.api({"apiToken": os.environ["TIKHUB_API_TOKEN"]}))
    result = await dispatcher.call_tool("tikhub_list_tools", {"category": "tiktok"})
"""

from __future__ import annotations

from pathlib import Path

import httpx

from tikhub_bridge.adapters.generic import register_generic_tools
from tikhub_bridge.adapters.proxy import register_proxy_tools
from tikhub_bridge.audit import AuditLogger
from tikhub_bridge.catalog import ToolCatalog
from tikhub_bridge.categories import count_by_category, format_category_counts
from tikhub_bridge.client import TikHubClient
from tikhub_bridge.config import REGISTRATION_GENERIC, PluginConfig
from tikhub_bridge.exceptions import ConfigurationError, RemoteError
from tikhub_bridge.host.base import PluginAPI
from tikhub_bridge.host.logger import LOG_PREFIX


class TikHubPlugin:
    """Wires configuration, API client, catalog and audit trail together."""

    def __init__(
        self,
        config: PluginConfig,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the plugin.

        Args:
            config: Validated plugin configuration.
            transport: Optional httpx transport for the API client.
        """
        self._config = config
        self._client = TikHubClient(
            api_token=config.api_token,
            base_url=config.base_url,
            timeout=config.timeout,
            transport=transport,
        )
        self._catalog = ToolCatalog(
            self._client,
            enabled_categories=config.enabled_categories,
            max_tools=config.max_tools,
        )
        self._audit: AuditLogger | None = None
        if config.audit_log_file:
            self._audit = AuditLogger(Path(config.audit_log_file))

    @property
    def name(self) -> str:
        """Return plugin identifier."""
        return "tikhub"

    @property
    def version(self) -> str:
        """Return plugin version."""
        return "1.0.0"

    @property
    def config(self) -> PluginConfig:
        return self._config

    @property
    def client(self) -> TikHubClient:
        return self._client

    @property
    def catalog(self) -> ToolCatalog:
        return self._catalog

    def register_generic(self, api: PluginAPI) -> list[str]:
        """Register the list and call tools. Does no network I/O.

        Args:
            api: Host plugin API.

        Returns:
            Registered host tool names.
        """
        return register_generic_tools(
            api, self._client, self._catalog, self._config.tool_prefix, self._audit
        )

    async def register_per_tool(self, api: PluginAPI) -> list[str]:
        """Discover the catalog and register one host tool per remote tool.

        Args:
            api: Host plugin API.

        Returns:
            Registered host tool names.

        Raises:
            RemoteError: If discovery fails.
            Exception: Whatever the host raises from ``register_tool``.
        """
        return await register_proxy_tools(
            api, self._client, self._catalog, self._config.tool_prefix, self._audit
        )

    def close_audit_log(self) -> None:
        """Close the audit log file, if one is open."""
        if self._audit:
            self._audit.close()

    async def close(self) -> None:
        """Release the HTTP client and the audit log file."""
        await self._client.close()
        self.close_audit_log()


def _load_config(api: PluginAPI) -> PluginConfig | None:
    """Read and validate the host configuration, logging failures."""
    try:
        config = PluginConfig.from_dict(api.config)
        config.validate()
    except ConfigurationError as e:
        api.log.error(f"{LOG_PREFIX} {e.message}; plugin not started")
        return None
    return config


def _create_plugin(
    api: PluginAPI, config: PluginConfig, transport: httpx.AsyncBaseTransport | None
) -> TikHubPlugin | None:
    """Build the plugin, logging failures to open the audit log."""
    try:
        return TikHubPlugin(config, transport=transport)
    except OSError as e:
        api.log.error(f"{LOG_PREFIX} Cannot open audit log {config.audit_log_file}: {e}")
        return None


def register(
    api: PluginAPI, transport: httpx.AsyncBaseTransport | None = None
) -> TikHubPlugin | None:
    """Synchronous entry point.

    Registers the list and call tools. The catalog is discovered on their
    first use.

    Args:
        api: Host plugin API.
        transport: Optional httpx transport for the API client.

    Returns:
        The plugin instance, or None if the plugin did not load.
    """
    config = _load_config(api)
    if config is None:
        return None

    if config.registration_mode != REGISTRATION_GENERIC:
        api.log.warn(
            f"{LOG_PREFIX} registrationMode '{config.registration_mode}' needs "
            "asynchronous setup; registering list/call tools instead"
        )

    plugin = _create_plugin(api, config, transport)
    if plugin is None:
        return None

    try:
        names = plugin.register_generic(api)
    except Exception as e:
        api.log.error(f"{LOG_PREFIX} Failed to register tools: {str(e) or type(e).__name__}")
        # No HTTP client exists before the first call.
        plugin.close_audit_log()
        return None

    api.log.info(f"{LOG_PREFIX} Registered {', '.join(names)}; tools load on first use")
    api.log.info(f"{LOG_PREFIX} Plugin loaded")
    return plugin


async def setup(
    api: PluginAPI, transport: httpx.AsyncBaseTransport | None = None
) -> TikHubPlugin | None:
    """Asynchronous entry point.

    In per-tool mode the catalog is fetched now and every remote tool is
    registered; a discovery failure aborts the load with nothing registered.
    In generic mode this behaves like :func:`register`.

    Args:
        api: Host plugin API.
        transport: Optional httpx transport for the API client.

    Returns:
        The plugin instance, or None if the plugin did not load.
    """
    config = _load_config(api)
    if config is None:
        return None

    if config.registration_mode == REGISTRATION_GENERIC:
        return register(api, transport=transport)

    plugin = _create_plugin(api, config, transport)
    if plugin is None:
        return None

    api.log.info(f"{LOG_PREFIX} Connecting to TikHub API at {config.base_url}...")

    try:
        tools = await plugin.catalog.get_tools()
    except RemoteError as e:
        api.log.error(f"{LOG_PREFIX} Failed to fetch tool list: {e.message}")
        await plugin.close()
        return None

    api.log.info(f"{LOG_PREFIX} Discovered {plugin.catalog.total_discovered} tools")
    api.log.info(
        f"{LOG_PREFIX} Registering {len(tools)} tools, categories: "
        f"{format_category_counts(count_by_category(tools))}"
    )

    try:
        await plugin.register_per_tool(api)
    except Exception as e:
        api.log.error(f"{LOG_PREFIX} Failed to register tools: {str(e) or type(e).__name__}")
        await plugin.close()
        return None

    api.log.info(f"{LOG_PREFIX} Plugin loaded")
    return plugin
