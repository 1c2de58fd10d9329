"""
Access gate. The session cookie is resolved against the session store on
every request; nothing about authorization is cached between requests.
"""

from typing import Optional

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from .components.auth import sessions
from .platform.config import settings
from .platform.database import get_db
from .platform.errors import Unauthenticated

LOGIN_PAGE = "/login"
LANDING_PAGE = "/view"


def session_token(request: Request) -> Optional[str]:
    return request.cookies.get(settings.SESSION_COOKIE_NAME)


def get_optional_user_id(request: Request, db: Session = Depends(get_db)) -> Optional[str]:
    user_id = sessions.current_user_id(db, session_token(request))
    request.state.user_id = user_id
    return user_id


def require_api_user(user_id: Optional[str] = Depends(get_optional_user_id)) -> str:
    if not user_id:
        raise Unauthenticated()
    return user_id


def require_page_user(user_id: Optional[str] = Depends(get_optional_user_id)) -> str:
    if not user_id:
        raise Unauthenticated(redirect_to=LOGIN_PAGE)
    return user_id


__all__ = [
    "LANDING_PAGE",
    "LOGIN_PAGE",
    "get_optional_user_id",
    "require_api_user",
    "require_page_user",
    "session_token",
]
