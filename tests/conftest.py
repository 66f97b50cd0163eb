# tests/conftest.py
"""
Pytest configuration and fixtures.

No network: outbound deliveries go through httpx.MockTransport and every
request the relay makes is captured in a BouncerRecorder.
"""

from typing import Any, Dict, List, Optional

import httpx
import pytest
from fastapi import FastAPI, Request
from fastapi.testclient import TestClient

from bouncer_relay.hooks import HookContext
from bouncer_relay.main import create_app
from bouncer_relay.plugin import BouncerPlugin
from bouncer_relay.settings import Settings
from bouncer_relay.webhooks import BouncerExecutor

BOUNCER_URL = "https://bouncer.example.com/api/v1/ingest"
HANDSHAKE_TOKEN = "handshake-secret"
AUTH_TOKEN = "Bearer auth-secret"


class BouncerRecorder:
    """Fake bouncer that records requests and answers with a fixed status."""

    def __init__(self, status_code: int = 202, error: Optional[Exception] = None):
        self.status_code = status_code
        self.error = error
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return httpx.Response(self.status_code)

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)


class FakeCommentLoader:
    """Stands in for the host's request-scoped comment cache."""

    def __init__(self, comments: Optional[Dict[str, Any]] = None):
        self.comments = comments or {}
        self.calls: List[str] = []

    async def load(self, comment_id: str):
        self.calls.append(comment_id)
        return self.comments.get(comment_id)


class FakeTranslator:
    def translate(self, key: str, *replacements: str) -> str:
        if replacements:
            return f"{key}:{','.join(replacements)}"
        return key.upper()


def make_settings(**overrides) -> Settings:
    values = dict(
        ingestion_url=BOUNCER_URL,
        handshake_token=HANDSHAKE_TOKEN,
        auth_token=AUTH_TOKEN,
        delivery_timeout_seconds=2.0,
    )
    values.update(overrides)
    return Settings(**values)


def make_plugin(settings: Settings, recorder: BouncerRecorder, translator=None) -> BouncerPlugin:
    executor = BouncerExecutor(settings, transport=recorder.transport())
    return BouncerPlugin(settings, translator=translator, executor=executor)


def make_client(settings: Settings, translator=None) -> TestClient:
    """Relay app whose fake auth middleware takes the role from X-Test-Role."""
    app: FastAPI = create_app(settings, translator=translator)

    @app.middleware("http")
    async def fake_authentication(request: Request, call_next):
        role = request.headers.get("X-Test-Role")
        request.state.user = {"id": "user-1", "role": role} if role else None
        return await call_next(request)

    return TestClient(app)


@pytest.fixture
def recorder() -> BouncerRecorder:
    return BouncerRecorder()


@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest.fixture
def plugin(settings, recorder) -> BouncerPlugin:
    return make_plugin(settings, recorder)


@pytest.fixture
def hook_context() -> HookContext:
    return HookContext(comments=FakeCommentLoader())
