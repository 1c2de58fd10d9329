from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from ...shared.utils import ensure_utc
from ..scoring.schemas import AnswerValue


class QuestionKey(BaseModel):
    """One question of the submitted quiz; only the answer key is graded."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    correct_answer: AnswerValue = Field(alias="correctAnswer")


class AssessmentSubmit(BaseModel):
    subject: str = Field(min_length=1, max_length=100)
    answers: List[Optional[AnswerValue]]
    questions: List[QuestionKey] = Field(min_length=1)


class SubmitResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    assessment_id: int = Field(alias="assessmentId")
    score: int
    total_questions: int = Field(alias="totalQuestions")
    percentage: int
    message: str = "Assessment saved successfully"


class AnswerRecord(BaseModel):
    questionNumber: int
    userAnswer: Optional[AnswerValue] = None
    correctAnswer: Optional[AnswerValue] = None
    isCorrect: bool


class AssessmentSummary(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: int
    subject: str
    score: int
    total_questions: int = Field(alias="totalQuestions")
    percentage: int
    submitted_at: datetime = Field(alias="submittedAt")

    @classmethod
    def from_record(cls, record) -> "AssessmentSummary":
        return cls(
            id=record.id,
            subject=record.subject,
            score=record.score,
            total_questions=record.total_questions,
            percentage=record.percentage,
            submitted_at=ensure_utc(record.submitted_at),
        )


class AssessmentDetail(AssessmentSummary):
    owner_id: str = Field(alias="ownerId")
    answers: List[AnswerRecord]

    @classmethod
    def from_record(cls, record) -> "AssessmentDetail":
        return cls(
            id=record.id,
            owner_id=record.owner_id,
            subject=record.subject,
            answers=[AnswerRecord.model_validate(item) for item in record.answers or []],
            score=record.score,
            total_questions=record.total_questions,
            percentage=record.percentage,
            submitted_at=ensure_utc(record.submitted_at),
        )
