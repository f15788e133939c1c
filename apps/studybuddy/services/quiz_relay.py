from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from studybuddy.core.exceptions import InvalidRequestError
from studybuddy.core.settings import settings
from studybuddy.prompts import load_prompt
from studybuddy.schemas.quiz import (
    DEFAULT_QUESTION_COUNT,
    Difficulty,
    QuizGenerateRequest,
    clamp_question_count,
    coerce_difficulty,
)

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = load_prompt("quiz", "system.md")
USER_PROMPT = load_prompt("quiz", "user.md")


def build_quiz_messages(
    topic: str,
    difficulty: Difficulty | str = Difficulty.medium,
    question_count: Any = DEFAULT_QUESTION_COUNT,
) -> list[dict[str, str]]:
    """Build the system and user turns for a quiz request.

    The system turn pins the output contract: exactly ``question_count``
    questions of 4 options each, ``correctAnswer`` as a 0-based index, JSON only.
    """
    level = coerce_difficulty(difficulty).value
    count = clamp_question_count(question_count)
    return [
        {"role": "system", "content": SYSTEM_PROMPT.format(num_questions=count)},
        {
            "role": "user",
            "content": USER_PROMPT.format(difficulty=level, topic=topic, num_questions=count),
        },
    ]


@dataclass
class QuizRelayService:
    """Forward quiz requests to the LLM runtime and hand back its raw output.

    The model's text is returned untouched; interpreting it is the caller's job.
    """

    llm: Any = None
    json_format: bool | None = None

    def __post_init__(self) -> None:
        if self.llm is None:
            from studybuddy.core.dependencies import get_llm_service

            self.llm = get_llm_service()
        if self.json_format is None:
            self.json_format = settings.quiz_json_format

    async def generate_quiz(self, request: QuizGenerateRequest) -> str:
        topic = request.topic.strip()
        if not topic:
            raise InvalidRequestError("Topic is required", code="missing_topic")

        messages = build_quiz_messages(topic, request.difficulty, request.number_of_questions)
        logger.info(
            "Generating quiz topic=%r difficulty=%s questions=%d",
            topic,
            request.difficulty.value,
            request.number_of_questions,
        )
        return await self.llm.chat(messages, format="json" if self.json_format else None)


__all__ = ["QuizRelayService", "build_quiz_messages"]
