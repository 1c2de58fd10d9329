"""Quiz grading: exact-match comparison against the answer key."""

from __future__ import annotations

from typing import Any, Optional, Sequence

from ...platform.errors import ValidationFailure
from .schemas import AnswerDetail, AnswerValue, GradedAttempt


def rounded_percentage(score: int, total: int) -> int:
    """score / total scaled to 0-100, rounded half up in integer arithmetic."""
    if total <= 0:
        raise ValidationFailure("At least one question is required")
    return (score * 200 + total) // (2 * total)


def answers_match(given: Any, expected: Any) -> bool:
    """Strict equality over JSON scalars.

    Numbers compare by value (1 matches 1.0); otherwise the types must agree,
    so "2" never matches 2 and True never matches 1.
    """
    if isinstance(given, bool) or isinstance(expected, bool):
        return type(given) is type(expected) and given == expected
    if isinstance(given, (int, float)) and isinstance(expected, (int, float)):
        return given == expected
    return type(given) is type(expected) and given == expected


def grade_answers(
    correct_answers: Sequence[Optional[AnswerValue]],
    submitted_answers: Sequence[Optional[AnswerValue]],
) -> GradedAttempt:
    """Grade one attempt.

    ``correct_answers[i]`` is the key for question ``i + 1``; the submitted
    list must be aligned with it index for index.
    """
    total = len(correct_answers)
    if total == 0:
        raise ValidationFailure("At least one question is required")
    if len(submitted_answers) != total:
        raise ValidationFailure(
            f"Expected {total} answers but received {len(submitted_answers)}"
        )

    details = []
    score = 0
    for index, (expected, given) in enumerate(zip(correct_answers, submitted_answers)):
        is_correct = answers_match(given, expected)
        if is_correct:
            score += 1
        details.append(
            AnswerDetail(
                question_number=index + 1,
                user_answer=given,
                correct_answer=expected,
                is_correct=is_correct,
            )
        )

    return GradedAttempt(
        answers=details,
        score=score,
        total_questions=total,
        percentage=rounded_percentage(score, total),
    )
