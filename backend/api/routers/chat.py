from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Request
from fastapi.exception_handlers import request_validation_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from backend.core.config import Settings
from backend.core.llm_cloud import LLMServiceError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")

CHAT_PATH = "/api/chat"
RETRY_AFTER_SECONDS = 1


class ChatRequest(BaseModel):
    message: Optional[str] = Field(default=None, description="User message; blank messages are rejected.")


def _remember_session(response: JSONResponse, settings: Settings, sid: str) -> None:
    response.set_cookie(settings.cookie_name, sid, httponly=True, samesite="lax")


def _service_error(exc: LLMServiceError) -> JSONResponse:
    content: Dict[str, Any] = {"error": "OpenAI API error", "detail": exc.detail}
    if not exc.retryable:
        return JSONResponse(status_code=500, content=content)
    content["retryable"] = True
    headers = {"Retry-After": str(RETRY_AFTER_SECONDS)}
    # no provider status means timeout or connection failure
    status = 503 if exc.status_code is None else 500
    return JSONResponse(status_code=status, content=content, headers=headers)


async def chat_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Bodies that do not carry a usable string ``message`` count as empty."""
    if request.url.path == CHAT_PATH:
        logger.info("Rejected chat body: %s", [e.get("type") for e in exc.errors()])
        return JSONResponse(status_code=400, content={"error": "Empty message"})
    return await request_validation_exception_handler(request, exc)


@router.get("/health")
def health(request: Request) -> dict:
    online = request.app.state.chat_service.cfg.online
    return {"ok": True, "mode": "online" if online else "offline"}


@router.post("/chat")
def chat(request: Request, payload: Optional[ChatRequest] = None) -> JSONResponse:
    text = ((payload.message if payload else None) or "").strip()
    if not text:
        return JSONResponse(status_code=400, content={"error": "Empty message"})

    settings: Settings = request.app.state.settings
    store = request.app.state.store
    service = request.app.state.chat_service

    sid, is_new = store.resolve(request.cookies.get(settings.cookie_name))
    if is_new:
        logger.info("New session sid=%s", sid)

    try:
        result = service.chat(sid, text)
        response = JSONResponse({"reply": result.reply, "emotion": result.emotion})
    except LLMServiceError as exc:
        logger.error("Completion failed for sid=%s status=%s", sid, exc.status_code)
        response = _service_error(exc)
    except Exception as exc:
        logger.exception("Chat processing failed: %s", exc)
        response = JSONResponse(
            status_code=500,
            content={"error": "Server error", "detail": str(exc) or type(exc).__name__},
        )

    if is_new:
        _remember_session(response, settings, sid)
    return response


@router.post("/clear")
def clear(request: Request) -> dict:
    sid = request.cookies.get(request.app.state.settings.cookie_name)
    request.app.state.chat_service.clear(sid)
    return {"ok": True}


@router.get("/history")
def history(request: Request) -> Dict[str, Any]:
    sid = request.cookies.get(request.app.state.settings.cookie_name)
    turns = request.app.state.store.get_all(sid)
    return {
        "sid": sid if turns else None,
        "turns": [t.as_message() for t in turns],
        "count": len(turns),
    }
