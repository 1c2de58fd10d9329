import logging
from typing import Type, TypeVar

from fastapi import APIRouter, Depends, Request
from fastapi.responses import RedirectResponse
from pydantic import BaseModel, ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool

from ...deps import LANDING_PAGE, LOGIN_PAGE, require_api_user, session_token
from ...platform.database import get_db
from ...platform.errors import DuplicateKey, Unauthenticated, Unavailable, ValidationFailure, error_response
from ...platform.security import hash_password_async, verify_password_async
from . import repository, sessions
from .schemas import LoginRequest, RegisterRequest, UserProfile

logger = logging.getLogger("quizportal.auth")

router = APIRouter(tags=["Auth"])

HOME_PAGE = "/home"

PayloadT = TypeVar("PayloadT", bound=BaseModel)


async def read_payload(request: Request, model: Type[PayloadT]) -> PayloadT:
    """Accept either a JSON body or an HTML form post."""
    content_type = request.headers.get("content-type", "")
    try:
        if content_type.startswith("application/json"):
            raw = await request.json()
        else:
            raw = dict(await request.form())
    except ValueError:
        raise ValidationFailure("Malformed request body")
    if not isinstance(raw, dict):
        raise ValidationFailure("Request body must be an object")
    try:
        return model.model_validate(raw)
    except ValidationError as exc:
        fields = ", ".join(str(err["loc"][0]) for err in exc.errors() if err.get("loc"))
        raise ValidationFailure(f"Invalid or missing fields: {fields}" if fields else None)


@router.post("/register")
async def register(request: Request, db: Session = Depends(get_db)):
    body = await read_payload(request, RegisterRequest)
    try:
        existing = await run_in_threadpool(
            repository.find_by_id_or_email, db, body.id, body.email
        )
    except SQLAlchemyError:
        logger.exception("Registration lookup failed")
        raise Unavailable("Registration failed")
    if existing is not None:
        raise DuplicateKey()

    password_hash = await hash_password_async(body.password)
    try:
        await run_in_threadpool(
            lambda: repository.create_user(
                db,
                external_id=body.id,
                display_name=body.name,
                email=body.email,
                password_hash=password_hash,
            )
        )
    except SQLAlchemyError:
        logger.exception("Registration insert failed")
        raise Unavailable("Registration failed")

    logger.info("Registered user=%s", body.id)
    return RedirectResponse(url=LOGIN_PAGE, status_code=302)


@router.post("/login")
async def login(request: Request, db: Session = Depends(get_db)):
    body = await read_payload(request, LoginRequest)
    try:
        user = await run_in_threadpool(repository.find_by_id, db, body.id)
    except SQLAlchemyError:
        logger.exception("Login lookup failed")
        raise Unavailable("Login failed")

    if user is None or not await verify_password_async(body.password, user.password_hash):
        logger.info("Failed login attempt for user=%s", body.id)
        raise Unauthenticated("Invalid credentials")

    previous = session_token(request)
    try:
        # Drop any session the browser already carried before issuing a new one.
        await run_in_threadpool(sessions.logout, db, previous)
        token = await run_in_threadpool(sessions.login, db, user.external_id)
    except SQLAlchemyError:
        logger.exception("Session creation failed")
        raise Unavailable("Login failed")

    response = RedirectResponse(url=LANDING_PAGE, status_code=302)
    sessions.set_session_cookie(response, token)
    return response


@router.get("/logout")
def logout(request: Request, db: Session = Depends(get_db)):
    try:
        sessions.logout(db, session_token(request))
    except SQLAlchemyError:
        logger.exception("Session teardown failed")
        raise Unavailable("Logout failed")
    response = RedirectResponse(url=HOME_PAGE, status_code=302)
    sessions.clear_session_cookie(response)
    return response


@router.get("/api/user", response_model=UserProfile)
def get_profile(
    request: Request,
    user_id: str = Depends(require_api_user),
    db: Session = Depends(get_db),
):
    try:
        user = repository.find_by_id(db, user_id)
        if user is None:
            # Session outlived its user row; end it.
            sessions.logout(db, session_token(request))
    except SQLAlchemyError:
        logger.exception("Profile lookup failed for user=%s", user_id)
        raise Unavailable("Server error")
    if user is None:
        response = error_response(404, "User not found")
        sessions.clear_session_cookie(response)
        return response
    return UserProfile.from_user(user)
