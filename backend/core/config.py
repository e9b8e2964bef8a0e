"""Application settings for the MoodChat backend."""
from __future__ import annotations
import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()

DEFAULT_PERSONA = (
    "You are a thoughtful conversational assistant. You pay attention to the "
    "user's emotions and respond with empathy."
)

@dataclass(frozen=True)
class Settings:
    app_name: str = "MoodChat API"
    allow_origins: tuple[str, ...] = ("*",)  # demo; lock down in production
    max_history: int = 40  # includes the persona turn
    host: str = "0.0.0.0"
    port: int = 3000
    cookie_name: str = "sid"
    persona_prompt: str = DEFAULT_PERSONA

    def __post_init__(self) -> None:
        if self.max_history < 2:
            raise ValueError(f"max_history must be at least 2, got {self.max_history}")


def _origins(raw: str | None) -> tuple[str, ...]:
    origins = tuple(o.strip() for o in (raw or "").split(",") if o.strip())
    return origins or ("*",)


def load_settings() -> Settings:
    return Settings(
        app_name=os.getenv("APP_NAME", "MoodChat API"),
        allow_origins=_origins(os.getenv("CORS_ALLOW_ORIGINS")),
        max_history=int(os.getenv("MAX_HISTORY", "40")),
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "3000")),
        cookie_name=os.getenv("SESSION_COOKIE", "sid"),
        persona_prompt=os.getenv("PERSONA_PROMPT") or DEFAULT_PERSONA,
    )
