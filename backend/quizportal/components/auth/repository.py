"""User directory: lookups and inserts against the users table."""

from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ...models.user import User
from ...platform.errors import DuplicateKey

logger = logging.getLogger("quizportal.auth")


def find_by_id_or_email(db: Session, external_id: str, email: str) -> Optional[User]:
    return (
        db.query(User)
        .filter(or_(User.external_id == external_id, User.email == email))
        .first()
    )


def find_by_id(db: Session, external_id: str) -> Optional[User]:
    return db.query(User).filter(User.external_id == external_id).first()


def create_user(
    db: Session,
    *,
    external_id: str,
    display_name: str,
    email: str,
    password_hash: str,
) -> User:
    """Insert a user; the unique indexes on external_id and email decide duplicates."""
    user = User(
        external_id=external_id,
        display_name=display_name,
        email=email,
        password_hash=password_hash,
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        logger.info("Rejected duplicate registration external_id=%s", external_id)
        raise DuplicateKey()
    db.refresh(user)
    return user
