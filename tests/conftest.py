"""Shared fixtures for TikHub bridge tests."""

from __future__ import annotations

import json
from typing import Any, Callable

import httpx
import pytest

BASE_URL = "https://tikhub.test"
TOKEN = "test-token"

SAMPLE_TOOLS = [
    {"name": "xiaohongshu_web_search_notes", "description": "Search Xiaohongshu notes"},
    {"name": "tiktok_web_fetch_user_profile", "description": "Fetch a TikTok user profile"},
    {"name": "douyin_app_fetch_video", "description": "Fetch a Douyin video"},
    {"name": "tiktok_app_fetch_comments", "description": "Fetch TikTok comments"},
    {"name": "bilibili_web_fetch_video", "description": "Fetch a Bilibili video"},
    {"name": "health_check", "description": "Health check"},
]


class RecordingLogger:
    """Host logger that keeps messages per level."""

    def __init__(self) -> None:
        self.messages: dict[str, list[str]] = {"debug": [], "info": [], "warn": [], "error": []}

    def debug(self, message: str) -> None:
        self.messages["debug"].append(message)

    def info(self, message: str) -> None:
        self.messages["info"].append(message)

    def warn(self, message: str) -> None:
        self.messages["warn"].append(message)

    def error(self, message: str) -> None:
        self.messages["error"].append(message)


class FakeTikHub:
    """Stand-in for the TikHub API, served through httpx.MockTransport."""

    def __init__(self, tools: list[dict[str, Any]] | None = None) -> None:
        self.tools: Any = SAMPLE_TOOLS if tools is None else tools
        self.tools_status = 200
        self.call_status = 200
        self.call_response: Any = {"result": {"code": 200, "data": [], "message": "ok"}}
        self.call_handler: Callable[[dict[str, Any]], Any] | None = None
        self.requests: list[httpx.Request] = []
        self.call_bodies: list[dict[str, Any]] = []

    @property
    def discovery_count(self) -> int:
        return sum(1 for r in self.requests if r.url.path == "/tools")

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)

        if request.url.path == "/tools" and request.method == "GET":
            if self.tools_status != 200:
                return httpx.Response(self.tools_status)
            return httpx.Response(200, json=self.tools)

        if request.url.path == "/tools/call" and request.method == "POST":
            body = json.loads(request.content)
            self.call_bodies.append(body)
            if self.call_status != 200:
                return httpx.Response(self.call_status)
            if self.call_handler is not None:
                return httpx.Response(200, json=self.call_handler(body))
            return httpx.Response(200, json=self.call_response)

        return httpx.Response(404)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)


@pytest.fixture
def fake_api() -> FakeTikHub:
    """Fake TikHub API with the sample catalog."""
    return FakeTikHub()


@pytest.fixture
def logger() -> RecordingLogger:
    """Recording host logger."""
    return RecordingLogger()


@pytest.fixture
def host_config() -> dict[str, Any]:
    """Host configuration pointing at the fake API."""
    return {"apiToken": TOKEN, "baseUrl": BASE_URL}


@pytest.fixture
def make_api() -> Callable[..., FakeTikHub]:
    """Factory for fake APIs with a custom catalog."""
    return FakeTikHub


@pytest.fixture
def sample_tools() -> list[dict[str, Any]]:
    """Copy of the sample catalog."""
    return [dict(tool) for tool in SAMPLE_TOOLS]
