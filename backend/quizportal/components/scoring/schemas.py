"""Pydantic models describing a graded quiz attempt."""

from __future__ import annotations

from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictFloat, StrictInt, StrictStr

# A JSON scalar kept exactly as submitted; strict members stop "2" and 2 from merging.
AnswerValue = Union[StrictBool, StrictInt, StrictFloat, StrictStr]


class AnswerDetail(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    question_number: int = Field(alias="questionNumber")
    user_answer: Optional[AnswerValue] = Field(default=None, alias="userAnswer")
    correct_answer: Optional[AnswerValue] = Field(default=None, alias="correctAnswer")
    is_correct: bool = Field(alias="isCorrect")


class GradedAttempt(BaseModel):
    answers: List[AnswerDetail]
    score: int
    total_questions: int
    percentage: int

    def answer_documents(self) -> List[dict]:
        """Per-question detail in the stored (camelCase) shape."""
        return [detail.model_dump(by_alias=True) for detail in self.answers]
