"""Central dependency providers (FastAPI routes and scripts).

Service objects are process-scoped so routes share one instance and tests can
swap them through ``app.dependency_overrides`` or ``cache_clear()``.
"""

from __future__ import annotations

from functools import lru_cache
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from studybuddy.services.chat_service import ChatRelayService
    from studybuddy.services.llm_service import LLMService
    from studybuddy.services.quiz_relay import QuizRelayService
    from studybuddy.services.study_plan_email import StudyPlanMailer


@lru_cache(maxsize=1)
def get_llm_service() -> LLMService:
    from studybuddy.services.llm_service import LLMService

    return LLMService()


@lru_cache(maxsize=1)
def get_quiz_relay_service() -> QuizRelayService:
    from studybuddy.services.quiz_relay import QuizRelayService

    return QuizRelayService(llm=get_llm_service())


@lru_cache(maxsize=1)
def get_chat_relay_service() -> ChatRelayService:
    from studybuddy.services.chat_service import ChatRelayService

    return ChatRelayService(llm=get_llm_service())


@lru_cache(maxsize=1)
def get_study_plan_mailer() -> StudyPlanMailer:
    from studybuddy.services.study_plan_email import StudyPlanMailer

    return StudyPlanMailer()
