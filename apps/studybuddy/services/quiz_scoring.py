from __future__ import annotations

from typing import Optional, Sequence

from pydantic import BaseModel

from studybuddy.schemas.quiz import QuizQuestionSet


class AnswerRecord(BaseModel):
    selected: Optional[int]
    is_correct: bool
    timed_out: bool = False


class QuizScore(BaseModel):
    correct: int
    total: int
    percentage: int
    answers: list[AnswerRecord]


def score_quiz(question_set: QuizQuestionSet, selections: Sequence[Optional[int]]) -> QuizScore:
    """Score one attempt.

    ``None`` (or a missing trailing selection) means the question timed out.
    Selections past the last question are ignored.
    """
    answers: list[AnswerRecord] = []
    for i, question in enumerate(question_set.questions):
        selected = selections[i] if i < len(selections) else None
        answers.append(
            AnswerRecord(
                selected=selected,
                is_correct=selected is not None and selected == question.correct_answer,
                timed_out=selected is None,
            )
        )
    correct = sum(1 for a in answers if a.is_correct)
    total = len(answers)
    # round half up
    percentage = int(correct * 100 / total + 0.5) if total else 0
    return QuizScore(correct=correct, total=total, percentage=percentage, answers=answers)
