"""HTML page routes. Pages are static files; the gate decides who sees them."""

import logging
from pathlib import Path
from typing import Optional

from fastapi import APIRouter, Depends
from fastapi.responses import FileResponse, RedirectResponse

from ...deps import LANDING_PAGE, get_optional_user_id, require_page_user
from ...platform.config import settings
from ...platform.errors import NotFound

logger = logging.getLogger("quizportal.pages")

router = APIRouter(tags=["Pages"], include_in_schema=False)


def _page(*parts: str) -> FileResponse:
    path = Path(settings.VIEWS_DIR).joinpath(*parts)
    if not path.is_file():
        logger.error("Missing page template %s", path)
        raise NotFound("Page not found")
    return FileResponse(path, media_type="text/html")


def _anonymous_page(user_id: Optional[str], filename: str):
    if user_id:
        return RedirectResponse(url=LANDING_PAGE, status_code=302)
    return _page(filename)


@router.get("/")
def root(user_id: Optional[str] = Depends(get_optional_user_id)):
    return RedirectResponse(url=LANDING_PAGE if user_id else "/home", status_code=302)


@router.get("/home")
def home(user_id: Optional[str] = Depends(get_optional_user_id)):
    return _anonymous_page(user_id, "home.html")


@router.get("/register")
def register_page(user_id: Optional[str] = Depends(get_optional_user_id)):
    return _anonymous_page(user_id, "register.html")


@router.get("/login")
def login_page(user_id: Optional[str] = Depends(get_optional_user_id)):
    return _anonymous_page(user_id, "login.html")


@router.get("/view")
def dashboard(user_id: str = Depends(require_page_user)):
    return _page("view.html")


@router.get("/subjects/{subject}")
def subject_page(subject: str, user_id: str = Depends(require_page_user)):
    name = subject.lower()
    if name not in settings.SUBJECTS:
        raise NotFound("Subject not found")
    return _page("subjects", f"{name}.html")
