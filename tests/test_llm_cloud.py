import pytest
import requests

from backend.core.llm_cloud import LLMServiceError, chat_completion, extract_content

from conftest import FakeResponse, completion


@pytest.mark.parametrize(
    "data",
    [
        None,
        "text",
        {},
        {"choices": None},
        {"choices": []},
        {"choices": ["oops"]},
        {"choices": [{}]},
        {"choices": [{"message": None}]},
        {"choices": [{"message": {}}]},
        {"choices": [{"message": {"content": None}}]},
        {"choices": [{"message": {"content": 42}}]},
    ],
)
def test_extract_content_defaults_to_empty(data):
    assert extract_content(data) == ""


def test_extract_content_reads_first_choice():
    data = {"choices": [{"message": {"content": "first"}}, {"message": {"content": "second"}}]}
    assert extract_content(data) == "first"


def test_chat_completion_sends_model_messages_and_sampling(provider, online_cfg):
    messages = [{"role": "system", "content": "s"}, {"role": "user", "content": "u"}]
    assert chat_completion(online_cfg, messages, temperature=0.8, max_tokens=800) == "Hello there"

    call = provider.calls[0]
    assert call["url"] == online_cfg.endpoint
    assert call["headers"]["Authorization"] == "Bearer sk-test"
    assert call["timeout"] == online_cfg.timeout
    assert call["json"] == {
        "model": "gpt-4o-mini",
        "messages": messages,
        "temperature": 0.8,
        "max_tokens": 800,
    }


def test_non_success_raises_with_provider_body(provider, online_cfg):
    provider.chat_response = FakeResponse(401, text='{"error": {"message": "bad key"}}')
    with pytest.raises(LLMServiceError) as excinfo:
        chat_completion(online_cfg, [], temperature=0.8, max_tokens=800)
    assert excinfo.value.status_code == 401
    assert excinfo.value.detail == '{"error": {"message": "bad key"}}'
    assert not excinfo.value.retryable
    assert len(provider.calls) == 1


def test_rate_limit_is_retryable(provider, online_cfg):
    provider.chat_response = FakeResponse(429, text="slow down")
    with pytest.raises(LLMServiceError) as excinfo:
        chat_completion(online_cfg, [], temperature=0.8, max_tokens=800)
    assert excinfo.value.retryable


@pytest.mark.parametrize("exc", [requests.Timeout("read timed out"), requests.ConnectionError("refused")])
def test_transport_failures_are_retryable(provider, online_cfg, exc):
    provider.chat_response = exc
    with pytest.raises(LLMServiceError) as excinfo:
        chat_completion(online_cfg, [], temperature=0.8, max_tokens=800)
    assert excinfo.value.status_code is None
    assert excinfo.value.retryable


def test_non_json_success_body_yields_empty_text(provider, online_cfg):
    provider.chat_response = FakeResponse(200, payload=None, text="<html>")
    assert chat_completion(online_cfg, [], temperature=0.8, max_tokens=800) == ""


def test_missing_content_yields_empty_text(provider, online_cfg):
    provider.chat_response = FakeResponse(200, completion(None))
    assert chat_completion(online_cfg, [], temperature=0.8, max_tokens=800) == ""
