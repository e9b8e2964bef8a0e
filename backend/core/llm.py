# backend/core/llm.py
from __future__ import annotations
import os
from dataclasses import dataclass
from typing import Optional

OPENAI_CHAT_URL = "https://api.openai.com/v1/chat/completions"

EMOTION_LABELS = ("joy", "sadness", "anger", "fear", "surprise", "neutral", "disgust", "tired")
NEUTRAL = "neutral"

@dataclass(frozen=True)
class LLMConfig:
    api_key: Optional[str] = None  # unset -> offline echo mode
    endpoint: str = OPENAI_CHAT_URL
    model: str = "gpt-4o-mini"
    temperature: float = 0.8
    max_tokens: int = 800
    classifier_max_tokens: int = 10
    timeout: float = 30.0  # seconds, per request

    @property
    def online(self) -> bool:
        return bool(self.api_key)


def load_llm_config() -> LLMConfig:
    return LLMConfig(
        api_key=os.getenv("OPENAI_API_KEY") or None,
        endpoint=os.getenv("OPENAI_BASE_URL") or OPENAI_CHAT_URL,
        model=os.getenv("OPENAI_MODEL", "gpt-4o-mini"),
        temperature=float(os.getenv("CHAT_TEMPERATURE", "0.8")),
        max_tokens=int(os.getenv("CHAT_MAX_TOKENS", "800")),
        classifier_max_tokens=int(os.getenv("EMOTION_MAX_TOKENS", "10")),
        timeout=float(os.getenv("OPENAI_TIMEOUT", "30")),
    )


EMOTION_SYSTEM_PROMPT = (
    "You are an emotion classifier. Answer with exactly one word from this list: "
    + ", ".join(EMOTION_LABELS)
    + "."
)

def build_emotion_messages(user_text: str) -> list[dict]:
    return [
        {"role": "system", "content": EMOTION_SYSTEM_PROMPT},
        {"role": "user", "content": f'User text: "{user_text}"'},
    ]
