import logging
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ...deps import require_api_user
from ...platform.database import get_db
from ...platform.errors import NotFound, Unavailable
from ..scoring.scoring_core import grade_answers
from . import repository
from .schemas import AssessmentDetail, AssessmentSubmit, AssessmentSummary, SubmitResult

logger = logging.getLogger("quizportal.assessments")

router = APIRouter(prefix="/api", tags=["Assessments"])


@router.get("/assessments", response_model=List[AssessmentSummary])
def list_assessments(
    user_id: str = Depends(require_api_user),
    db: Session = Depends(get_db),
):
    try:
        records = repository.list_by_owner(db, user_id)
    except SQLAlchemyError:
        logger.exception("Error fetching assessments for user=%s", user_id)
        raise Unavailable("Failed to fetch assessment history")
    return [AssessmentSummary.from_record(record) for record in records]


@router.get("/assessments/{assessment_id}", response_model=AssessmentDetail)
def get_assessment(
    assessment_id: str,
    user_id: str = Depends(require_api_user),
    db: Session = Depends(get_db),
):
    # Ids are integers; anything else cannot name a record.
    if not assessment_id.isdigit():
        raise NotFound("Assessment not found")
    try:
        record = repository.get_by_id_and_owner(db, int(assessment_id), user_id)
    except SQLAlchemyError:
        logger.exception("Error fetching assessment id=%s", assessment_id)
        raise Unavailable("Failed to fetch assessment")
    if record is None:
        raise NotFound("Assessment not found")
    return AssessmentDetail.from_record(record)


@router.post("/assessment", response_model=SubmitResult)
def submit_assessment(
    body: AssessmentSubmit,
    user_id: str = Depends(require_api_user),
    db: Session = Depends(get_db),
):
    graded = grade_answers(
        [question.correct_answer for question in body.questions],
        body.answers,
    )
    try:
        assessment_id = repository.append_assessment(
            db,
            owner_id=user_id,
            subject=body.subject,
            answers=graded.answer_documents(),
            score=graded.score,
            total_questions=graded.total_questions,
            percentage=graded.percentage,
        )
    except SQLAlchemyError:
        logger.exception("Error saving assessment for user=%s", user_id)
        raise Unavailable("Failed to save assessment")

    logger.info(
        "Assessment saved id=%s user=%s subject=%s score=%d/%d",
        assessment_id,
        user_id,
        body.subject,
        graded.score,
        graded.total_questions,
    )
    return SubmitResult(
        assessment_id=assessment_id,
        score=graded.score,
        total_questions=graded.total_questions,
        percentage=graded.percentage,
    )
