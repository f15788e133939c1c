from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterable

from studybuddy.core.settings import settings
from studybuddy.prompts import load_prompt
from studybuddy.schemas.chat import ChatMessage

logger = logging.getLogger(__name__)

COURSE_TUTOR_PROMPT = load_prompt("chat", "course_tutor.md")
TYPING_PLACEHOLDER = "..."


def course_system_prompt(course_title: str | None) -> ChatMessage:
    title = (course_title or "").strip() or "this course"
    return ChatMessage(role="system", content=COURSE_TUTOR_PROMPT.format(course_title=title))


def drop_typing_placeholders(history: Iterable[ChatMessage]) -> list[ChatMessage]:
    """Remove the assistant "..." turns a UI shows while a reply is pending."""
    return [
        m for m in history if not (m.role == "assistant" and m.content == TYPING_PLACEHOLDER)
    ]


@dataclass
class ChatRelayService:
    llm: Any = None
    num_predict: int | None = None

    def __post_init__(self) -> None:
        if self.llm is None:
            from studybuddy.core.dependencies import get_llm_service

            self.llm = get_llm_service()
        if self.num_predict is None:
            self.num_predict = settings.chat_num_predict

    async def reply(self, messages: list[ChatMessage]) -> str:
        """Forward the turns verbatim and return the assistant's reply."""
        logger.info("Relaying chat with %d turns", len(messages))
        return await self.llm.chat(
            [m.model_dump() for m in messages],
            num_predict=self.num_predict,
        )


__all__ = ["ChatRelayService", "course_system_prompt", "drop_typing_placeholders"]
