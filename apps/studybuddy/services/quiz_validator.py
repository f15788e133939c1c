"""Turn raw quiz output from the relay into a validated question set.

The model is asked for a JSON array but may wrap it as ``{"quizQuestions": [...]}``,
return some other JSON object, or surround the array with prose. Interpretation
runs in a fixed order:

1. decode: a payload that is already parsed is used as-is; text is tried as a
   whole JSON document, then as the first ``[...]`` span it contains;
2. extract: a bare array, then the ``quizQuestions`` field of an object. For
   text, the first decoding that yields candidates wins;
3. validate every candidate, failing the whole batch on the first bad one.

The result is ``Valid`` or ``Invalid``. ``resolve_quiz`` converts ``Invalid``
into the fixed sample quiz so a caller always ends up with something to show.
"""

from __future__ import annotations

import json
import logging
import math
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional, Sequence, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from studybuddy.schemas.quiz import QuizQuestion, QuizQuestionSet

logger = logging.getLogger(__name__)

_ARRAY_SPAN = re.compile(r"\[[\s\S]*\]")

SAMPLE_OPTIONS = (
    "Correct answer",
    "Incorrect answer",
    "Another incorrect answer",
    "One more incorrect answer",
)


class ValidationFailure(str, Enum):
    invalid_question_format = "InvalidQuestionFormat"
    insufficient_options = "InsufficientOptions"
    invalid_correct_answer = "InvalidCorrectAnswer"
    no_questions_generated = "NoQuestionsGenerated"
    unparseable_response = "UnparseableResponse"


@dataclass(frozen=True)
class Valid:
    questions: tuple[QuizQuestion, ...]


@dataclass(frozen=True)
class Invalid:
    reason: ValidationFailure
    message: str
    index: Optional[int] = None


ValidationResult = Union[Valid, Invalid]


# ---------- decoding ----------

_NOT_DECODED = object()


def _decode_document(text: str) -> Any:
    try:
        return json.loads(text)
    except ValueError:
        return _NOT_DECODED


def _decode_array_span(text: str) -> Any:
    match = _ARRAY_SPAN.search(text)
    if match is None:
        return _NOT_DECODED
    return _decode_document(match.group(0))


TEXT_DECODERS: tuple[Callable[[str], Any], ...] = (_decode_document, _decode_array_span)


# ---------- extraction ----------


def _bare_array(payload: Any) -> Optional[list[Any]]:
    return payload if isinstance(payload, list) else None


def _wrapped_questions(payload: Any) -> Optional[list[Any]]:
    if isinstance(payload, dict):
        inner = payload.get("quizQuestions")
        if isinstance(inner, list):
            return inner
    return None


EXTRACTORS: tuple[Callable[[Any], Optional[list[Any]]], ...] = (_bare_array, _wrapped_questions)


def extract_candidates(payload: Any) -> Optional[list[Any]]:
    for extractor in EXTRACTORS:
        candidates = extractor(payload)
        if candidates is not None:
            return candidates
    return None


# ---------- validation ----------


def _as_index(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and math.isfinite(value) and value.is_integer():
        return int(value)
    return None


class _CandidateQuestion(BaseModel):
    """Shape check for one model-produced question, before range checks."""

    model_config = ConfigDict(strict=True, populate_by_name=True)

    question: str
    options: list[str] = Field(min_length=2)
    correct_answer: int = Field(alias="correctAnswer")

    @field_validator("question")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("question text is blank")
        return value

    @field_validator("correct_answer", mode="before")
    @classmethod
    def _integral(cls, value: Any) -> int:
        index = _as_index(value)
        if index is None:
            raise ValueError("correctAnswer must be a whole number")
        return index


# Failure reasons by offending field, in the order fields are checked.
_FIELD_FAILURES: tuple[tuple[frozenset[str], ValidationFailure], ...] = (
    (frozenset({"", "question"}), ValidationFailure.invalid_question_format),
    (frozenset({"options"}), ValidationFailure.insufficient_options),
    (frozenset({"correctAnswer", "correct_answer"}), ValidationFailure.invalid_correct_answer),
)


def _failure_for(exc: ValidationError) -> ValidationFailure:
    fields = {str(err["loc"][0]) if err["loc"] else "" for err in exc.errors()}
    for names, reason in _FIELD_FAILURES:
        if fields & names:
            return reason
    return ValidationFailure.invalid_question_format


def _invalid(reason: ValidationFailure, index: int) -> Invalid:
    number = index + 1
    messages = {
        ValidationFailure.invalid_question_format: f"Invalid question format at question {number}",
        ValidationFailure.insufficient_options: f"Question {number} must have at least 2 options",
        ValidationFailure.invalid_correct_answer: f"Question {number} has an invalid correct answer",
    }
    return Invalid(reason, messages[reason], index)


def validate_question(raw: Any, index: int) -> Union[QuizQuestion, Invalid]:
    try:
        candidate = _CandidateQuestion.model_validate(raw)
    except ValidationError as exc:
        return _invalid(_failure_for(exc), index)

    if not 0 <= candidate.correct_answer < len(candidate.options):
        return _invalid(ValidationFailure.invalid_correct_answer, index)

    return QuizQuestion(
        question=candidate.question,
        options=tuple(candidate.options),
        correct_answer=candidate.correct_answer,
    )


def validate_candidates(candidates: Optional[Sequence[Any]]) -> ValidationResult:
    """Validate every candidate in order; one bad question invalidates the batch."""
    if not isinstance(candidates, list) or not candidates:
        return Invalid(
            ValidationFailure.no_questions_generated,
            "No questions were generated. Please try a different topic.",
        )
    questions: list[QuizQuestion] = []
    for index, raw in enumerate(candidates):
        checked = validate_question(raw, index)
        if isinstance(checked, Invalid):
            return checked
        questions.append(checked)
    return Valid(tuple(questions))


def validate_payload(payload: Any) -> ValidationResult:
    """Validate an already-decoded JSON payload (array or ``quizQuestions`` object)."""
    return validate_candidates(extract_candidates(payload))


def validate_text(text: str) -> ValidationResult:
    """Validate raw model text.

    Each decoder is tried in turn and the first decoding that yields candidates
    is validated, so an array embedded in prose or in an unexpected JSON object
    is still recovered.
    """
    text = text or ""
    decoded = False
    for decoder in TEXT_DECODERS:
        payload = decoder(text)
        if payload is _NOT_DECODED:
            continue
        decoded = True
        candidates = extract_candidates(payload)
        if candidates is not None:
            return validate_candidates(candidates)
    if not decoded:
        return Invalid(
            ValidationFailure.unparseable_response,
            "Could not extract quiz JSON from the model response",
        )
    return validate_candidates(None)


# ---------- fallback ----------


def sample_quiz(title: str, label: str) -> QuizQuestionSet:
    """The fixed placeholder used whenever generation or validation fails."""
    return QuizQuestionSet(
        title=f"[Sample] {title}",
        questions=(
            QuizQuestion(
                question=f"Sample question about {label}",
                options=SAMPLE_OPTIONS,
                correct_answer=0,
            ),
        ),
        is_sample=True,
    )


def resolve_quiz(result: ValidationResult, *, title: str, label: str) -> QuizQuestionSet:
    if isinstance(result, Valid):
        return QuizQuestionSet(title=title, questions=result.questions)
    logger.warning(
        "Quiz validation failed reason=%s index=%s: %s; using sample quiz",
        result.reason.value,
        result.index,
        result.message,
    )
    return sample_quiz(title, label)


__all__ = [
    "Invalid",
    "Valid",
    "ValidationFailure",
    "ValidationResult",
    "extract_candidates",
    "resolve_quiz",
    "sample_quiz",
    "validate_candidates",
    "validate_payload",
    "validate_question",
    "validate_text",
]
