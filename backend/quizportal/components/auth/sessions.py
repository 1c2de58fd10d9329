"""Server-side sessions keyed by an opaque cookie token.

Only an HMAC digest of the token is stored. Every lookup goes to the table,
so a logout takes effect on the very next request.
"""

from __future__ import annotations

import logging
from datetime import timedelta
from typing import Optional

from fastapi import Response
from sqlalchemy.orm import Session

from ...models.session import UserSession
from ...platform.config import settings
from ...platform.security import new_session_token, session_token_digest
from ...shared.utils import ensure_utc, utcnow

logger = logging.getLogger("quizportal.sessions")


def login(db: Session, external_id: str) -> str:
    token = new_session_token()
    db.add(
        UserSession(
            token_digest=session_token_digest(token),
            user_external_id=external_id,
            expires_at=utcnow() + timedelta(minutes=settings.SESSION_LIFETIME_MINUTES),
        )
    )
    db.commit()
    logger.info("Session started for user=%s", external_id)
    return token


def current_user_id(db: Session, token: Optional[str]) -> Optional[str]:
    if not token:
        return None
    row = (
        db.query(UserSession)
        .filter(UserSession.token_digest == session_token_digest(token))
        .first()
    )
    if row is None:
        return None
    if ensure_utc(row.expires_at) <= utcnow():
        db.delete(row)
        db.commit()
        return None
    return row.user_external_id


def logout(db: Session, token: Optional[str]) -> None:
    if not token:
        return
    deleted = (
        db.query(UserSession)
        .filter(UserSession.token_digest == session_token_digest(token))
        .delete(synchronize_session=False)
    )
    db.commit()
    if deleted:
        logger.info("Session ended")


def set_session_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=token,
        max_age=settings.session_max_age_seconds,
        httponly=True,
        secure=settings.session_cookie_secure,
        samesite="lax",
        path="/",
    )


def clear_session_cookie(response: Response) -> None:
    response.delete_cookie(
        key=settings.SESSION_COOKIE_NAME,
        httponly=True,
        secure=settings.session_cookie_secure,
        samesite="lax",
        path="/",
    )
