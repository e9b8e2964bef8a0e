"""Single-word emotion classification through the completion service.

The classifier sees only the latest user message, never the history. Any
failure degrades to ``neutral``.
"""
from __future__ import annotations
import logging
import re

from backend.core.llm import LLMConfig, NEUTRAL, build_emotion_messages
from backend.core.llm_cloud import chat_completion

logger = logging.getLogger(__name__)

_NON_LETTERS = re.compile(r"[^A-Za-z]")

def normalize_label(raw: str | None) -> str:
    """Keep ASCII letters only, lower-cased; empty input maps to ``neutral``."""
    label = _NON_LETTERS.sub("", raw or "").lower()
    return label or NEUTRAL


def classify(cfg: LLMConfig, user_text: str) -> str:
    if not cfg.online:
        return NEUTRAL
    try:
        raw = chat_completion(
            cfg,
            build_emotion_messages(user_text),
            temperature=0.0,
            max_tokens=cfg.classifier_max_tokens,
        )
    except Exception as exc:  # classification failures never reach the caller
        logger.warning("Emotion classification failed, using %s: %s", NEUTRAL, exc)
        return NEUTRAL
    return normalize_label(raw)
