"""Pytest configuration and shared fixtures."""
from __future__ import annotations

import json
import os
from typing import Any, Dict, List

import pytest

# Importing tonify.main builds the relay app, which requires a credential
os.environ.setdefault("OPENAI_API_KEY", "test-key")

from fastapi.testclient import TestClient

from tonify.errors import UpstreamError
from tonify.main import create_app
from tonify.providers import BaseChatProvider
from tonify.relay import ToneRelay


class FakeProvider(BaseChatProvider):
    """Returns scripted completions and records every payload it was sent."""

    def __init__(self, reply: Any = None, error: Exception | None = None) -> None:
        super().__init__("fake")
        self.reply = reply
        self.error = error
        self.calls: List[Dict[str, Any]] = []

    def chat(self, payload: Dict[str, Any]) -> str:
        self.calls.append(payload)
        if self.error is not None:
            raise self.error
        if isinstance(self.reply, str):
            return self.reply
        return json.dumps(self.reply if self.reply is not None else {})


@pytest.fixture
def provider() -> FakeProvider:
    return FakeProvider()


@pytest.fixture
def relay(provider: FakeProvider) -> ToneRelay:
    return ToneRelay(provider, model="test-model")


@pytest.fixture
def client(relay: ToneRelay) -> TestClient:
    return TestClient(create_app(relay=relay))


@pytest.fixture
def failing_provider() -> FakeProvider:
    return FakeProvider(error=UpstreamError("fake: HTTP 503"))
