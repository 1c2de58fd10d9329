"""Password hashing and session-token digests."""

from __future__ import annotations

import hashlib
import hmac
import logging
import secrets

import bcrypt
from starlette.concurrency import run_in_threadpool

from .config import settings

logger = logging.getLogger("quizportal.security")


def get_password_hash(password: str) -> str:
    # gensalt embeds a fresh random salt, so equal inputs hash differently.
    salt = bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str | None) -> bool:
    if not hashed_password:
        return False
    try:
        return bcrypt.checkpw(plain_password.encode("utf-8"), hashed_password.encode("utf-8"))
    except ValueError:
        logger.warning("Stored password hash is malformed; treating as mismatch")
        return False


async def hash_password_async(password: str) -> str:
    return await run_in_threadpool(get_password_hash, password)


async def verify_password_async(plain_password: str, hashed_password: str | None) -> bool:
    return await run_in_threadpool(verify_password, plain_password, hashed_password)


def new_session_token() -> str:
    return secrets.token_urlsafe(32)


def session_token_digest(token: str) -> str:
    """Keyed digest stored in place of the raw cookie value."""
    return hmac.new(
        settings.SECRET_KEY.encode("utf-8"),
        token.encode("utf-8"),
        hashlib.sha256,
    ).hexdigest()
