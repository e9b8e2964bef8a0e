from __future__ import annotations

from typing import Any, Dict, List, Optional

import pytest
from fastapi.testclient import TestClient

from backend.app import create_app
from backend.core.config import Settings
from backend.core.llm import LLMConfig


def completion(content: Any) -> Dict[str, Any]:
    return {"choices": [{"message": {"role": "assistant", "content": content}}]}


class FakeResponse:
    def __init__(self, status_code: int = 200, payload: Any = None, text: Optional[str] = None) -> None:
        self.status_code = status_code
        self._payload = payload
        self.text = text if text is not None else ("" if payload is None else str(payload))

    @property
    def ok(self) -> bool:
        return self.status_code < 400

    def json(self) -> Any:
        if self._payload is None:
            raise ValueError("No JSON object could be decoded")
        return self._payload


class FakeProvider:
    """Stands in for ``requests.post``; classifier calls are the ones at temperature 0."""

    def __init__(self) -> None:
        self.calls: List[Dict[str, Any]] = []
        self.chat_response: Any = FakeResponse(200, completion("Hello there"))
        self.emotion_response: Any = FakeResponse(200, completion("Joy!"))

    def __call__(self, url, json=None, headers=None, timeout=None, **kwargs):
        self.calls.append({"url": url, "json": json, "headers": headers, "timeout": timeout})
        resp = self.emotion_response if json["temperature"] == 0.0 else self.chat_response
        if isinstance(resp, Exception):
            raise resp
        return resp

    @property
    def chat_calls(self) -> List[Dict[str, Any]]:
        return [c for c in self.calls if c["json"]["temperature"] != 0.0]

    @property
    def emotion_calls(self) -> List[Dict[str, Any]]:
        return [c for c in self.calls if c["json"]["temperature"] == 0.0]


@pytest.fixture
def settings() -> Settings:
    return Settings(persona_prompt="You are a test persona.")


@pytest.fixture
def offline_cfg() -> LLMConfig:
    return LLMConfig(api_key=None)


@pytest.fixture
def online_cfg() -> LLMConfig:
    return LLMConfig(api_key="sk-test", endpoint="https://llm.invalid/v1/chat/completions", timeout=5)


@pytest.fixture
def provider(monkeypatch) -> FakeProvider:
    fake = FakeProvider()
    monkeypatch.setattr("backend.core.llm_cloud.requests.post", fake)
    return fake


@pytest.fixture
def offline_app(settings, offline_cfg):
    return create_app(settings, offline_cfg)


@pytest.fixture
def online_app(settings, online_cfg, provider):
    return create_app(settings, online_cfg)


@pytest.fixture
def offline_client(offline_app) -> TestClient:
    return TestClient(offline_app)


@pytest.fixture
def online_client(online_app) -> TestClient:
    return TestClient(online_app)
