"""API package that assembles FastAPI routers."""

from .routers.chat import chat_validation_error, router as chat_router

__all__ = ["chat_router", "chat_validation_error"]
