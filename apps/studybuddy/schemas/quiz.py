from __future__ import annotations

import math
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

DEFAULT_QUESTION_COUNT = 5
MIN_QUESTION_COUNT = 1
MAX_QUESTION_COUNT = 20


class Difficulty(str, Enum):
    easy = "easy"
    medium = "medium"
    hard = "hard"


def coerce_difficulty(value: Any) -> Difficulty:
    """Map free-form input to a difficulty; anything unknown becomes medium."""
    if isinstance(value, Difficulty):
        return value
    if isinstance(value, str):
        try:
            return Difficulty(value.strip().lower())
        except ValueError:
            pass
    return Difficulty.medium


def clamp_question_count(value: Any) -> int:
    """Clamp a caller-supplied question count into [1, 20].

    Non-numeric input falls back to the default of 5; zero and negatives clamp to 1.
    """
    if isinstance(value, bool) or value is None:
        return DEFAULT_QUESTION_COUNT
    if isinstance(value, str):
        value = value.strip()
        try:
            value = int(value)
        except ValueError:
            try:
                value = float(value)
            except ValueError:
                return DEFAULT_QUESTION_COUNT
    if isinstance(value, int):
        return max(MIN_QUESTION_COUNT, min(value, MAX_QUESTION_COUNT))
    if not isinstance(value, float) or not math.isfinite(value):
        return DEFAULT_QUESTION_COUNT
    return max(MIN_QUESTION_COUNT, min(int(value), MAX_QUESTION_COUNT))


class QuizGenerateRequest(BaseModel):
    """Body of ``POST /api/generate-quiz``.

    ``difficulty`` and ``numberOfQuestions`` never fail validation; they are
    normalized instead. ``topic`` is trimmed here and checked for emptiness by
    the route so the rejection carries the relay's error shape.
    """

    model_config = ConfigDict(populate_by_name=True)

    topic: str = ""
    difficulty: Difficulty = Difficulty.medium
    number_of_questions: int = Field(default=DEFAULT_QUESTION_COUNT, alias="numberOfQuestions")

    @field_validator("topic", mode="before")
    @classmethod
    def _strip_topic(cls, value: Any) -> str:
        if value is None:
            return ""
        if not isinstance(value, str):
            value = str(value)
        return value.strip()

    @field_validator("difficulty", mode="before")
    @classmethod
    def _normalize_difficulty(cls, value: Any) -> Difficulty:
        return coerce_difficulty(value)

    @field_validator("number_of_questions", mode="before")
    @classmethod
    def _clamp_count(cls, value: Any) -> int:
        return clamp_question_count(value)


class QuizQuestion(BaseModel):
    """A validated multiple-choice question. Immutable once built."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    question: str = Field(min_length=1)
    options: tuple[str, ...] = Field(min_length=2)
    correct_answer: int = Field(alias="correctAnswer", ge=0)

    @model_validator(mode="after")
    def _answer_indexes_an_option(self) -> "QuizQuestion":
        if self.correct_answer >= len(self.options):
            raise ValueError("correctAnswer must index one of the options")
        return self

    @property
    def correct_option(self) -> str:
        return self.options[self.correct_answer]

    def to_wire(self) -> dict[str, Any]:
        return {
            "question": self.question,
            "options": list(self.options),
            "correctAnswer": self.correct_answer,
        }


class QuizQuestionSet(BaseModel):
    """Ordered questions ready for presentation.

    ``is_sample`` marks the fixed placeholder substituted when generation fails.
    """

    model_config = ConfigDict(frozen=True)

    title: str
    questions: tuple[QuizQuestion, ...] = Field(min_length=1)
    is_sample: bool = False

    def __len__(self) -> int:
        return len(self.questions)
