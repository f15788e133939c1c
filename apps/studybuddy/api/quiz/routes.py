from __future__ import annotations

import json
import logging

from fastapi import APIRouter, Depends, Response

from studybuddy.core.dependencies import get_quiz_relay_service
from studybuddy.core.exceptions import UpstreamError
from studybuddy.schemas.quiz import QuizGenerateRequest
from studybuddy.services.quiz_relay import QuizRelayService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["quiz"])


def _media_type(raw: str) -> str:
    try:
        json.loads(raw)
    except ValueError:
        return "text/plain"
    return "application/json"


@router.post("/generate-quiz")
async def generate_quiz(
    payload: QuizGenerateRequest,
    svc: QuizRelayService = Depends(get_quiz_relay_service),
) -> Response:
    """Return the model's quiz output exactly as the runtime produced it."""
    try:
        raw = await svc.generate_quiz(payload)
    except UpstreamError as exc:
        logger.error("Error generating quiz: %s", exc.details or exc.message)
        raise exc.with_context("Failed to generate quiz") from exc
    return Response(content=raw, media_type=_media_type(raw))
