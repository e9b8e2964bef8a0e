# backend/core/llm_cloud.py
"""OpenAI-compatible chat completion client.

Responses are treated as untrusted: every field access defaults to an empty
value instead of failing.
"""
from __future__ import annotations

import logging
from typing import Any, Optional

import requests

from .llm import LLMConfig

logger = logging.getLogger(__name__)

RETRYABLE_STATUS = {408, 409, 429, 500, 502, 503, 504}


class LLMServiceError(RuntimeError):
    """The completion service failed or returned a non-success status."""

    def __init__(self, detail: str, status_code: Optional[int] = None, retryable: bool = False) -> None:
        super().__init__(detail)
        self.detail = detail
        self.status_code = status_code
        self.retryable = retryable


def extract_content(data: Any) -> str:
    """Return ``choices[0].message.content`` or an empty string."""
    if not isinstance(data, dict):
        return ""
    choices = data.get("choices")
    if not isinstance(choices, list) or not choices:
        return ""
    first = choices[0]
    if not isinstance(first, dict):
        return ""
    message = first.get("message")
    if not isinstance(message, dict):
        return ""
    content = message.get("content")
    return content if isinstance(content, str) else ""


def chat_completion(cfg: LLMConfig, messages: list[dict], temperature: float, max_tokens: int) -> str:
    body = {
        "model": cfg.model,
        "messages": messages,
        "temperature": temperature,
        "max_tokens": max_tokens,
    }
    headers = {"Authorization": f"Bearer {cfg.api_key}"}
    try:
        r = requests.post(cfg.endpoint, json=body, headers=headers, timeout=cfg.timeout)
    except requests.Timeout as exc:
        logger.warning("Completion request timed out after %ss", cfg.timeout)
        raise LLMServiceError(f"Request timed out after {cfg.timeout}s", retryable=True) from exc
    except requests.RequestException as exc:
        logger.warning("Completion request failed: %s", exc)
        raise LLMServiceError(f"Request failed: {exc}", retryable=True) from exc

    if not r.ok:
        logger.warning("Completion service returned HTTP %s", r.status_code)
        raise LLMServiceError(r.text, status_code=r.status_code, retryable=r.status_code in RETRYABLE_STATUS)

    try:
        data = r.json()
    except ValueError:
        logger.warning("Completion service returned a non-JSON body")
        return ""
    return extract_content(data)
