# src/llm_relay/app.py
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Mapping, Optional

import uvicorn
from fastapi import APIRouter, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from llm_relay import __version__
from llm_relay.adapters import Provider, build_providers
from llm_relay.core.config import ConfigError, Settings, load_settings
from llm_relay.core.fallback import resolve
from llm_relay.core.logging import setup_logging
from llm_relay.models import ChatRequest, ChatResponse

logger = logging.getLogger(__name__)

MISSING_MESSAGES = "Invalid or missing 'messages' field."
INVALID_FORMAT = (
    "Invalid message format. Each message must have 'role' and 'content' as strings, "
    "with 'role' one of: system, user, assistant."
)

router = APIRouter()


class InvalidChatRequest(ValueError):
    """Payload rejected before any provider is called (HTTP 400)."""


def parse_chat_request(raw: Any) -> ChatRequest:
    messages = raw.get("messages") if isinstance(raw, dict) else None
    if not isinstance(messages, list) or not messages:
        raise InvalidChatRequest(MISSING_MESSAGES)
    try:
        return ChatRequest.model_validate(raw)
    except ValidationError as ex:
        raise InvalidChatRequest(INVALID_FORMAT) from ex


def _utc_timestamp() -> str:
    # e.g. 2024-05-01T12:00:00.123Z
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _error_status(ex: Exception) -> int:
    status = getattr(ex, "status_code", None) or getattr(ex, "status", None)
    if isinstance(status, int) and 400 <= status <= 599:
        return status
    return 500


@router.post("/api/chat")
async def chat(request: Request):
    settings: Settings = request.app.state.settings
    providers: Mapping[str, Provider] = request.app.state.providers

    try:
        try:
            raw = await request.json()
        except ValueError:
            raw = None

        try:
            req = parse_chat_request(raw)
        except InvalidChatRequest as ex:
            return JSONResponse(status_code=400, content={"error": str(ex)})

        result = await resolve(providers, req.messages, req.preferred_api)

        if not result.reply:
            return JSONResponse(
                status_code=503,
                content={
                    "error": "All available API attempts failed",
                    "message": "Service temporarily unavailable",
                },
            )

        body = ChatResponse(
            reply=result.reply,
            used_api=result.used_api,
            timestamp=_utc_timestamp(),
        )
        return JSONResponse(status_code=200, content=body.model_dump(by_alias=True))

    except Exception as ex:
        logger.error("API Error: %s", ex, exc_info=not settings.is_production)
        return JSONResponse(
            status_code=_error_status(ex),
            content={
                "error": "API request failed",
                "message": str(ex) or "Unknown error occurred",
            },
        )


@router.get("/healthz")
def health(request: Request):
    return {"status": "ok", "providers": list(request.app.state.providers)}


def create_app(
    settings: Optional[Settings] = None,
    providers: Optional[Mapping[str, Provider]] = None,
) -> FastAPI:
    """
    Build the relay app.

    settings defaults to load_settings() (raises ConfigError without any key);
    providers defaults to one client per configured key.
    """
    if settings is None:
        settings = load_settings()
    if providers is None:
        providers = build_providers(settings)

    app = FastAPI(title="LLM Relay", version=__version__)

    # One origin, POST + Content-Type only
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.allowed_origin],
        allow_methods=["POST"],
        allow_headers=["Content-Type"],
    )

    app.state.settings = settings
    app.state.providers = providers
    app.include_router(router)
    return app


def main() -> None:
    setup_logging()
    try:
        settings = load_settings()
    except ConfigError as ex:
        logger.critical("Refusing to start: %s", ex)
        raise SystemExit(1) from ex

    setup_logging(debug=settings.debug)
    app = create_app(settings)

    logger.info("Server running on port %s", settings.port)
    logger.info("Environment: %s", settings.env)
    logger.info("Available APIs: %s", ", ".join(settings.available_apis))

    uvicorn.run(app, host=settings.host, port=settings.port)
