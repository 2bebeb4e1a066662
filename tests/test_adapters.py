"""Tests for the registration adapters."""

import json

import pytest

from tikhub_bridge.adapters import (
    build_proxy_tool,
    guarded_handler,
    invoke_remote,
    register_generic_tools,
    register_proxy_tools,
    unwrap_result,
)
from tikhub_bridge.catalog import ToolCatalog
from tikhub_bridge.client import TikHubClient
from tikhub_bridge.exceptions import RemoteError
from tikhub_bridge.host import ToolDispatcher


@pytest.fixture
def client(fake_api):
    return TikHubClient("test-token", "https://tikhub.test", transport=fake_api.transport)


@pytest.fixture
def dispatcher():
    return ToolDispatcher()


@pytest.fixture
def api(dispatcher, logger, host_config):
    return dispatcher.api(host_config, log=logger)


class TestUnwrapResult:
    """Tests for unwrap_result."""

    def test_unwraps_envelope(self):
        """Should flatten the result envelope."""
        response = {"result": {"code": 200, "data": [1, 2], "message": "ok"}}
        assert unwrap_result(response) == {
            "success": True,
            "code": 200,
            "message": "ok",
            "data": [1, 2],
        }

    def test_passes_through_without_envelope(self):
        """Should return bodies without a result object unchanged."""
        response = {"detail": "something else", "result": None}
        assert unwrap_result(response) is response

    def test_passes_through_non_dict(self):
        """Should return non-object bodies unchanged."""
        assert unwrap_result([1, 2, 3]) == [1, 2, 3]


class TestInvokeRemote:
    """Tests for invoke_remote."""

    @pytest.mark.asyncio
    async def test_logs_and_unwraps(self, client, fake_api, logger):
        """Should log the call and unwrap the envelope."""
        fake_api.call_response = {"result": {"code": 200, "data": {"id": 1}, "message": "ok"}}

        result = await invoke_remote(client, "douyin_app_fetch_video", {"aweme_id": "1"}, logger)

        assert result == {"success": True, "code": 200, "message": "ok", "data": {"id": 1}}
        assert any("douyin_app_fetch_video" in m for m in logger.messages["info"])
        assert any("aweme_id" in m for m in logger.messages["debug"])

    @pytest.mark.asyncio
    async def test_debug_output_redacts_secrets(self, client, logger):
        """Should redact sensitive argument values in debug output."""
        await invoke_remote(client, "tiktok_user", {"cookie": "secret-value"}, logger)
        assert not any("secret-value" in m for m in logger.messages["debug"])

    @pytest.mark.asyncio
    async def test_propagates_remote_errors(self, client, fake_api, logger):
        """Should raise RemoteError for the boundary wrapper to handle."""
        fake_api.call_status = 502
        with pytest.raises(RemoteError):
            await invoke_remote(client, "tiktok_user", {}, logger)


class TestGuardedHandler:
    """Tests for guarded_handler."""

    @pytest.mark.asyncio
    async def test_wraps_payload(self, logger):
        """Should wrap a payload in a ToolResult."""

        async def func(params):
            return {"value": params["x"]}

        result = await guarded_handler(func, logger, "t")({"x": 1})

        assert result.details == {"value": 1}
        assert result.is_error is False

    @pytest.mark.asyncio
    async def test_converts_exceptions_to_data(self, logger):
        """Should return a failure payload instead of raising."""

        async def func(params):
            raise RemoteError("TikHub API error: 500 Internal Server Error", status_code=500)

        result = await guarded_handler(func, logger, "t")({})

        assert result.is_error is True
        assert result.details == {
            "success": False,
            "error": "TikHub API error: 500 Internal Server Error",
        }
        assert logger.messages["error"]

    @pytest.mark.asyncio
    async def test_marks_failure_payloads_as_errors(self, logger):
        """Should flag payloads that report success False."""

        async def func(params):
            return {"success": False, "error": "nope"}

        result = await guarded_handler(func, logger, "t")({})
        assert result.is_error is True

    @pytest.mark.asyncio
    async def test_validates_against_schema(self, logger):
        """Should not run the function when parameters do not match the schema."""
        calls = []

        async def func(params):
            calls.append(params)
            return {"ok": True}

        schema = {"type": "object", "properties": {"n": {"type": "integer"}}}
        handler = guarded_handler(func, logger, "t", schema=schema)

        rejected = await handler({"n": "one"})
        accepted = await handler({"n": 1})

        assert rejected.is_error is True
        assert rejected.details["success"] is False
        assert "'n'" in rejected.details["error"]
        assert accepted.details == {"ok": True}
        assert calls == [{"n": 1}]


class TestProxyTools:
    """Tests for per-tool registration."""

    def test_build_proxy_tool(self, api, client):
        """Should prefix the name and use an open parameter schema."""
        tool = {"name": "tiktok_web_fetch_user_profile", "description": "Fetch profile"}

        definition = build_proxy_tool(api, client, tool)

        assert definition.name == "tikhub_tiktok_web_fetch_user_profile"
        assert definition.description == "[TikHub] Fetch profile"
        assert definition.parameters["type"] == "object"
        assert definition.parameters["additionalProperties"] is True

    @pytest.mark.asyncio
    async def test_registers_one_tool_per_remote_tool(self, api, client, dispatcher, sample_tools):
        """Should register every tool in the filtered catalog."""
        catalog = ToolCatalog(client, enabled_categories=["tiktok"])

        registered = await register_proxy_tools(api, client, catalog)

        assert registered == [
            "tikhub_tiktok_web_fetch_user_profile",
            "tikhub_tiktok_app_fetch_comments",
        ]
        assert dispatcher.tool_names() == registered

    @pytest.mark.asyncio
    async def test_proxy_tool_calls_remote_name(self, api, client, dispatcher, fake_api):
        """Should call the remote tool without the host prefix."""
        await register_proxy_tools(api, client, ToolCatalog(client))

        result = await dispatcher.call_tool(
            "tikhub_tiktok_web_fetch_user_profile", {"unique_id": "abc"}
        )

        assert fake_api.call_bodies[-1] == {
            "tool_name": "tiktok_web_fetch_user_profile",
            "arguments": {"unique_id": "abc"},
        }
        assert result.details["success"] is True

    @pytest.mark.asyncio
    async def test_each_tool_keeps_its_own_name(self, api, client, dispatcher, fake_api):
        """Should bind each handler to its own remote tool."""
        await register_proxy_tools(api, client, ToolCatalog(client))

        await dispatcher.call_tool("tikhub_health_check", {})
        await dispatcher.call_tool("tikhub_douyin_app_fetch_video", {})

        assert [b["tool_name"] for b in fake_api.call_bodies] == [
            "health_check",
            "douyin_app_fetch_video",
        ]

    @pytest.mark.asyncio
    async def test_proxy_tool_failure_is_data(self, api, client, dispatcher, fake_api):
        """Should report call failures as data."""
        await register_proxy_tools(api, client, ToolCatalog(client))
        fake_api.call_status = 500

        result = await dispatcher.call_tool("tikhub_health_check", {})

        assert result.details["success"] is False
        assert "500" in result.details["error"]

    @pytest.mark.asyncio
    async def test_discovery_failure_registers_nothing(self, api, client, dispatcher, fake_api):
        """Should raise on discovery failure before registering anything."""
        fake_api.tools_status = 500
        with pytest.raises(RemoteError):
            await register_proxy_tools(api, client, ToolCatalog(client))
        assert dispatcher.tool_names() == []


class TestGenericTools:
    """Tests for list/call registration."""

    def test_registers_two_tools_without_io(self, api, client, dispatcher, fake_api):
        """Should register exactly two tools without contacting the API."""
        registered = register_generic_tools(api, client, ToolCatalog(client))

        assert registered == ["tikhub_list_tools", "tikhub_call_tool"]
        assert fake_api.requests == []

    def test_call_tool_schema_requires_tool_name(self, api, client, dispatcher):
        """Should require tool_name in the call tool schema."""
        register_generic_tools(api, client, ToolCatalog(client))
        schema = dispatcher.get_tool_schema("tikhub_call_tool")
        assert schema["required"] == ["tool_name"]
        assert "arguments" in schema["properties"]

    def test_custom_prefix(self, api, client):
        """Should apply the configured prefix."""
        registered = register_generic_tools(api, client, ToolCatalog(client), prefix="th_")
        assert registered == ["th_list_tools", "th_call_tool"]

    @pytest.mark.asyncio
    async def test_list_tools_loads_catalog_lazily(self, api, client, dispatcher, fake_api):
        """Should discover the catalog on the first list call only."""
        register_generic_tools(api, client, ToolCatalog(client))

        first = await dispatcher.call_tool("tikhub_list_tools", {})
        await dispatcher.call_tool("tikhub_list_tools", {"category": "tiktok"})

        assert first.details["total"] == 6
        assert "TikTok" in first.details["tools"]
        assert "usage" in first.details
        assert fake_api.discovery_count == 1

    @pytest.mark.asyncio
    async def test_list_tools_by_category(self, api, client, dispatcher):
        """Should narrow the listing to one category."""
        register_generic_tools(api, client, ToolCatalog(client))

        result = await dispatcher.call_tool("tikhub_list_tools", {"category": "douyin"})

        assert result.details["total"] == 1
        assert list(result.details["tools"]) == ["抖音"]
        assert json.loads(result.content[0]["text"])["total"] == 1

    @pytest.mark.asyncio
    async def test_list_tools_discovery_failure(self, api, client, dispatcher, fake_api):
        """Should return an error payload when discovery fails."""
        register_generic_tools(api, client, ToolCatalog(client))
        fake_api.tools_status = 500

        result = await dispatcher.call_tool("tikhub_list_tools", {})

        assert result.is_error is True
        assert "500" in result.details["error"]

    @pytest.mark.asyncio
    async def test_call_tool_forwards(self, api, client, dispatcher, fake_api):
        """Should forward tool_name and arguments."""
        register_generic_tools(api, client, ToolCatalog(client))
        fake_api.call_response = {"result": {"code": 200, "data": ["n1"], "message": "ok"}}

        result = await dispatcher.call_tool(
            "tikhub_call_tool",
            {"tool_name": "xiaohongshu_web_search_notes", "arguments": {"keyword": "coffee"}},
        )

        assert fake_api.call_bodies[-1] == {
            "tool_name": "xiaohongshu_web_search_notes",
            "arguments": {"keyword": "coffee"},
        }
        assert result.details == {"success": True, "code": 200, "message": "ok", "data": ["n1"]}

    @pytest.mark.asyncio
    async def test_call_tool_without_arguments(self, api, client, dispatcher, fake_api):
        """Should send an empty arguments object when omitted."""
        register_generic_tools(api, client, ToolCatalog(client))
        await dispatcher.call_tool("tikhub_call_tool", {"tool_name": "health_check"})
        assert fake_api.call_bodies[-1]["arguments"] == {}

    @pytest.mark.asyncio
    async def test_call_tool_requires_tool_name(self, api, client, dispatcher, fake_api):
        """Should reject calls without tool_name."""
        register_generic_tools(api, client, ToolCatalog(client))

        result = await dispatcher.call_tool("tikhub_call_tool", {"arguments": {}})

        assert result.is_error is True
        assert result.details["success"] is False
        assert "tool_name" in result.details["error"]
        assert fake_api.requests == []

    @pytest.mark.asyncio
    async def test_call_tool_rejects_empty_tool_name(self, api, client, dispatcher, fake_api):
        """Should reject an empty tool_name without contacting the API."""
        register_generic_tools(api, client, ToolCatalog(client))

        result = await dispatcher.call_tool("tikhub_call_tool", {"tool_name": ""})

        assert result.details["success"] is False
        assert fake_api.requests == []

    @pytest.mark.asyncio
    async def test_call_tool_rejects_non_string_tool_name(self, api, client, dispatcher, fake_api):
        """Should reject a tool_name that is not a string."""
        register_generic_tools(api, client, ToolCatalog(client))

        result = await dispatcher.call_tool("tikhub_call_tool", {"tool_name": 42})

        assert result.details["success"] is False
        assert "tool_name" in result.details["error"]
        assert fake_api.requests == []

    @pytest.mark.asyncio
    async def test_call_tool_rejects_non_object_arguments(
        self, api, client, dispatcher, fake_api, logger
    ):
        """Should reject arguments that are not an object."""
        register_generic_tools(api, client, ToolCatalog(client))
        result = await dispatcher.call_tool(
            "tikhub_call_tool", {"tool_name": "health_check", "arguments": [1]}
        )

        assert result.is_error is True
        assert result.details["success"] is False
        assert "arguments" in result.details["error"]
        assert fake_api.requests == []
        assert logger.messages["warn"]

    @pytest.mark.asyncio
    async def test_list_tools_rejects_non_string_category(
        self, api, client, dispatcher, fake_api
    ):
        """Should reject a category that is not a string without discovery."""
        register_generic_tools(api, client, ToolCatalog(client))

        result = await dispatcher.call_tool("tikhub_list_tools", {"category": 5})

        assert result.is_error is True
        assert result.details["success"] is False
        assert "category" in result.details["error"]
        assert fake_api.discovery_count == 0

    @pytest.mark.asyncio
    async def test_call_tool_raw_body_passthrough(self, api, client, dispatcher, fake_api):
        """Should return bodies without an envelope verbatim."""
        register_generic_tools(api, client, ToolCatalog(client))
        fake_api.call_response = {"status": "queued", "task_id": "t-1"}

        result = await dispatcher.call_tool("tikhub_call_tool", {"tool_name": "health_check"})

        assert result.details == {"status": "queued", "task_id": "t-1"}

    @pytest.mark.asyncio
    async def test_call_tool_does_not_need_catalog(self, api, client, dispatcher, fake_api):
        """Should call tools directly without discovering the catalog."""
        register_generic_tools(api, client, ToolCatalog(client))
        await dispatcher.call_tool("tikhub_call_tool", {"tool_name": "health_check"})
        assert fake_api.discovery_count == 0
