from __future__ import annotations

import logging
from dataclasses import dataclass

from backend.core import llm_cloud
from backend.core.llm import LLMConfig, NEUTRAL
from backend.core.session_store import SessionStore, Turn
from backend.inference.emotion import classify

logger = logging.getLogger(__name__)

OFFLINE_PREFIX = "Offline simulation: Echo: "


@dataclass(frozen=True)
class ChatResult:
    reply: str
    emotion: str


class ChatService:
    """Runs one chat turn: completion, then emotion classification."""

    def __init__(self, store: SessionStore, cfg: LLMConfig) -> None:
        self.store = store
        self.cfg = cfg

    def complete(self, sid: str, user_text: str) -> str:
        """Append the user turn, obtain the assistant reply and append it.

        Raises ``LLMServiceError`` when the service fails; in that case only
        the user turn has been recorded.
        """
        self.store.append(sid, Turn("user", user_text))

        if not self.cfg.online:
            reply = f"{OFFLINE_PREFIX}{user_text}"
        else:
            reply = llm_cloud.chat_completion(
                self.cfg,
                self.store.messages(sid),
                temperature=self.cfg.temperature,
                max_tokens=self.cfg.max_tokens,
            )

        self.store.append(sid, Turn("assistant", reply))
        return reply

    def chat(self, sid: str, user_text: str) -> ChatResult:
        session = self.store.get(sid)
        if session is None:
            raise KeyError(f"unknown session {sid}")
        # one chat turn at a time per session
        with session.lock:
            reply = self.complete(sid, user_text)
        emotion = classify(self.cfg, user_text) if self.cfg.online else NEUTRAL
        logger.info(
            "sid=%s reply_chars=%d emotion=%s turns=%d",
            sid, len(reply), emotion, len(session.turns),
        )
        return ChatResult(reply=reply, emotion=emotion)

    def clear(self, sid: str | None) -> None:
        self.store.clear(sid)
