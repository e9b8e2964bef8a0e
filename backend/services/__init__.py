"""Service layer modules for MoodChat."""

from .chat import ChatResult, ChatService, OFFLINE_PREFIX

__all__ = ["ChatResult", "ChatService", "OFFLINE_PREFIX"]
