from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from studybuddy.core.dependencies import get_chat_relay_service
from studybuddy.core.exceptions import UpstreamError
from studybuddy.schemas.chat import ChatRequest, ChatResponse
from studybuddy.services.chat_service import ChatRelayService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["chat"])


@router.post("/chat", response_model=ChatResponse)
async def chat(
    payload: ChatRequest,
    svc: ChatRelayService = Depends(get_chat_relay_service),
) -> ChatResponse:
    try:
        reply = await svc.reply(payload.messages)
    except UpstreamError as exc:
        logger.error("Chat error: %s", exc.details or exc.message)
        raise exc.with_context("Failed to process chat message") from exc
    return ChatResponse(message=reply)
