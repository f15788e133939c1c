"""Pydantic schemas shared across the app."""

from .chat import ChatMessage, ChatRequest, ChatResponse
from .quiz import (
    Difficulty,
    QuizGenerateRequest,
    QuizQuestion,
    QuizQuestionSet,
    clamp_question_count,
    coerce_difficulty,
)
from .study_plan import (
    PlanModule,
    PlanResource,
    PlanTopic,
    RenderedStudyPlan,
    StudyPlan,
    StudyPlanEmailRequest,
)

__all__ = [
    "ChatMessage",
    "ChatRequest",
    "ChatResponse",
    "Difficulty",
    "PlanModule",
    "PlanResource",
    "PlanTopic",
    "QuizGenerateRequest",
    "QuizQuestion",
    "QuizQuestionSet",
    "RenderedStudyPlan",
    "StudyPlan",
    "StudyPlanEmailRequest",
    "clamp_question_count",
    "coerce_difficulty",
]
