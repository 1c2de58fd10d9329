from sqlalchemy import Column, DateTime, Integer, JSON, String

from ..platform.database import Base


class Assessment(Base):
    __tablename__ = "assessments"

    id = Column(Integer, primary_key=True, index=True)
    # References users.external_id; no foreign key so user removal never cascades.
    owner_id = Column(String(200), index=True, nullable=False)
    subject = Column(String(100), nullable=False)
    answers = Column(JSON, nullable=False, default=list)
    score = Column(Integer, nullable=False)
    total_questions = Column(Integer, nullable=False)
    percentage = Column(Integer, nullable=False)
    submitted_at = Column(DateTime(timezone=True), nullable=False, index=True)
