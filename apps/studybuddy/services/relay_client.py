"""Caller-side client for the relay.

This is the boundary where model output is interpreted: quiz bodies go through
``quiz_validator`` and every failure ends in a usable result (the sample quiz or
a canned chat reply) instead of an exception.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Optional

import httpx

from studybuddy.core.exceptions import InvalidRequestError
from studybuddy.core.settings import settings
from studybuddy.schemas.chat import ChatMessage
from studybuddy.schemas.quiz import (
    DEFAULT_QUESTION_COUNT,
    Difficulty,
    QuizQuestionSet,
    clamp_question_count,
    coerce_difficulty,
)
from studybuddy.services.chat_service import course_system_prompt, drop_typing_placeholders
from studybuddy.services.quiz_validator import (
    ValidationResult,
    resolve_quiz,
    sample_quiz,
    validate_text,
)

logger = logging.getLogger(__name__)

CHAT_UNAVAILABLE_REPLY = (
    "I'm having trouble connecting to the AI service. "
    "Please check your connection and try again."
)
CHAT_EMPTY_REPLY = "I'm sorry, I couldn't process your request. Please try again."


def interpret_quiz_response(response: httpx.Response) -> ValidationResult:
    """Validate a relay reply.

    The body is the model text whatever its content type, so it always goes
    through the text flow and an array inside an unexpected object is recovered.
    """
    return validate_text(response.text)


class RelayClient:
    def __init__(
        self,
        base_url: str | None = None,
        *,
        client: Optional[httpx.Client] = None,
        timeout: float | None = None,
    ) -> None:
        self.base_url = (base_url or settings.relay_base_url).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.relay_timeout_seconds
        self._client = client

    def _post(self, path: str, payload: dict[str, Any]) -> httpx.Response:
        if self._client is not None:
            return self._client.post(f"{self.base_url}{path}", json=payload)
        with httpx.Client(timeout=self.timeout) as client:
            return client.post(f"{self.base_url}{path}", json=payload)

    def _get(self, path: str) -> httpx.Response:
        if self._client is not None:
            return self._client.get(f"{self.base_url}{path}")
        with httpx.Client(timeout=self.timeout) as client:
            return client.get(f"{self.base_url}{path}")

    def health(self) -> bool:
        try:
            resp = self._get("/api/health")
        except httpx.HTTPError as exc:
            logger.debug("Relay health check failed: %s", exc)
            return False
        return resp.status_code == 200

    def generate_quiz(
        self,
        topic: str,
        *,
        difficulty: Difficulty | str = Difficulty.medium,
        question_count: Any = DEFAULT_QUESTION_COUNT,
        title: str | None = None,
        label: str | None = None,
    ) -> QuizQuestionSet:
        """Request a quiz and return validated questions or the sample quiz.

        An empty topic is rejected before any network call. ``title`` names the
        set (defaults to the topic); ``label`` is what the sample question is
        about (defaults to the topic).
        """
        topic = (topic or "").strip()
        if not topic:
            raise InvalidRequestError("Topic is required", code="missing_topic")
        title = title or topic
        label = label or topic

        body = {
            "topic": topic,
            "difficulty": coerce_difficulty(difficulty).value,
            "numberOfQuestions": clamp_question_count(question_count),
        }
        try:
            resp = self._post("/api/generate-quiz", body)
        except httpx.HTTPError as exc:
            logger.warning("Could not reach relay for quiz generation: %s", exc)
            return sample_quiz(title, label)

        if resp.is_error:
            logger.warning("Relay failed to generate quiz (%s): %s", resp.status_code, resp.text)
            return sample_quiz(title, label)

        return resolve_quiz(interpret_quiz_response(resp), title=title, label=label)

    def generate_module_quiz(
        self,
        course_title: str | None,
        module_label: str,
        *,
        difficulty: Difficulty | str = Difficulty.medium,
        question_count: Any = DEFAULT_QUESTION_COUNT,
    ) -> QuizQuestionSet:
        title = f"{course_title or 'Quiz'} - {module_label}"
        return self.generate_quiz(
            f"{course_title} - {module_label}" if course_title else module_label,
            difficulty=difficulty,
            question_count=question_count,
            title=title,
            label=module_label,
        )

    def chat(self, history: Iterable[ChatMessage], *, course_title: str | None = None) -> str:
        """Send the conversation and return the assistant reply, never raising."""
        messages = drop_typing_placeholders(history)
        if course_title is not None:
            messages = [course_system_prompt(course_title), *messages]
        try:
            resp = self._post("/api/chat", {"messages": [m.model_dump() for m in messages]})
            resp.raise_for_status()
            data = resp.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("Chat via relay failed: %s", exc)
            return CHAT_UNAVAILABLE_REPLY
        reply = data.get("message") if isinstance(data, dict) else None
        return reply if isinstance(reply, str) and reply else CHAT_EMPTY_REPLY


__all__ = ["RelayClient", "interpret_quiz_response"]
