"""Assessment log: append-only storage of graded attempts."""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from sqlalchemy.orm import Session

from ...models.assessment import Assessment
from ...shared.utils import utcnow


def append_assessment(
    db: Session,
    *,
    owner_id: str,
    subject: str,
    answers: List[dict],
    score: int,
    total_questions: int,
    percentage: int,
    submitted_at: Optional[datetime] = None,
) -> int:
    assessment = Assessment(
        owner_id=owner_id,
        subject=subject,
        answers=answers,
        score=score,
        total_questions=total_questions,
        percentage=percentage,
        submitted_at=submitted_at or utcnow(),
    )
    db.add(assessment)
    db.commit()
    db.refresh(assessment)
    return assessment.id


def list_by_owner(db: Session, owner_id: str) -> List[Assessment]:
    """Newest first; ids break ties between equal timestamps."""
    return (
        db.query(Assessment)
        .filter(Assessment.owner_id == owner_id)
        .order_by(Assessment.submitted_at.desc(), Assessment.id.desc())
        .all()
    )


def get_by_id_and_owner(db: Session, record_id: int, owner_id: str) -> Optional[Assessment]:
    return (
        db.query(Assessment)
        .filter(Assessment.id == record_id, Assessment.owner_id == owner_id)
        .first()
    )
