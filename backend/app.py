from __future__ import annotations
import logging
from typing import Optional

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from backend.api import chat_router, chat_validation_error
from backend.core.config import Settings, load_settings
from backend.core.llm import LLMConfig, load_llm_config
from backend.core.session_store import SessionStore
from backend.services import ChatService

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None, llm_cfg: Optional[LLMConfig] = None) -> FastAPI:
    settings = settings or load_settings()
    llm_cfg = llm_cfg or load_llm_config()

    app = FastAPI(title=settings.app_name)
    app.include_router(chat_router)
    app.add_exception_handler(RequestValidationError, chat_validation_error)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.allow_origins),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    store = SessionStore(settings.persona_prompt, max_history=settings.max_history)
    app.state.settings = settings
    app.state.store = store
    app.state.chat_service = ChatService(store, llm_cfg)

    if llm_cfg.online:
        logger.info("Using model %s at %s", llm_cfg.model, llm_cfg.endpoint)
    else:
        logger.warning("OPENAI_API_KEY is not set; replies use the offline echo")
    return app


def run() -> None:
    import uvicorn

    logging.basicConfig(level=logging.INFO, format="[%(asctime)s] %(levelname)s %(name)s - %(message)s")
    settings = load_settings()
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port)
