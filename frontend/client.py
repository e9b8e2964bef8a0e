from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

import requests

Result = Tuple[Optional[Dict[str, Any]], Optional[str]]


def _normalize_url(base_url: str) -> str:
    return base_url.rstrip("/")


def _error_text(response: requests.Response) -> str:
    try:
        data = response.json()
    except ValueError:
        return f"HTTP {response.status_code}: {response.text[:200]}"
    if isinstance(data, dict) and data.get("error"):
        detail = data.get("detail")
        return f"{data['error']}: {detail}" if detail else str(data["error"])
    return f"HTTP {response.status_code}"


class ChatClient:
    """Thin client for the chat API; keeps the ``sid`` cookie in its session."""

    def __init__(self, base_url: str, session: Optional[requests.Session] = None, timeout: float = 60) -> None:
        self.base_url = _normalize_url(base_url)
        self.session = session or requests.Session()
        self.timeout = timeout

    def _call(self, method: str, path: str, payload: Optional[Dict[str, Any]] = None) -> Result:
        url = f"{self.base_url}{path}"
        try:
            response = self.session.request(method, url, json=payload, timeout=self.timeout)
        except requests.RequestException as exc:
            return None, f"Failed to reach {path}: {exc}"
        if not response.ok:
            return None, _error_text(response)
        try:
            data = response.json()
        except ValueError as exc:
            return None, f"Invalid JSON returned by {path}: {exc}"
        if isinstance(data, dict):
            return data, None
        return None, f"Unexpected response format from {path}."

    def send(self, message: str) -> Result:
        return self._call("POST", "/api/chat", {"message": message})

    def clear(self) -> Result:
        return self._call("POST", "/api/clear")

    def history(self) -> Result:
        return self._call("GET", "/api/history")
