from sqlalchemy import Column, DateTime, Integer, String
from sqlalchemy.sql import func

from ..platform.database import Base


class UserSession(Base):
    __tablename__ = "user_sessions"

    id = Column(Integer, primary_key=True, index=True)
    token_digest = Column(String(64), unique=True, index=True, nullable=False)
    user_external_id = Column(String(200), index=True, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    expires_at = Column(DateTime(timezone=True), nullable=False)
