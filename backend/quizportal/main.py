from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import Depends, FastAPI
from fastapi.staticfiles import StaticFiles
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from .components.assessments.api import router as assessments_router
from .components.auth.api import router as auth_router
from .components.pages.api import router as pages_router
from .platform.config import INSECURE_SECRET_KEYS, settings
from .platform.database import dispose_engine, get_db
from .platform.errors import register_exception_handlers
from .platform.logging import setup_logging
from .platform.middleware import (
    RateLimitMiddleware,
    RequestLoggingMiddleware,
    SecurityHeadersMiddleware,
)

# Set up logging
logger = setup_logging()

# ---------------------------------------------------------------------------
# Production safety: fail-fast if SECRET_KEY is an insecure default
# ---------------------------------------------------------------------------
if settings.is_production and settings.SECRET_KEY in INSECURE_SECRET_KEYS:
    raise RuntimeError(
        "CRITICAL: SECRET_KEY is set to an insecure default. "
        "Set a strong SECRET_KEY in your .env before running in production."
    )

_docs_url = None if settings.is_production else "/api/docs"
_openapi_url = None if settings.is_production else "/api/openapi.json"


@asynccontextmanager
async def _lifespan(_app: FastAPI):
    logger.info(
        "Quiz portal started | env=%s secure_cookie=%s",
        settings.DEPLOYMENT_ENV,
        settings.session_cookie_secure,
    )
    yield
    dispose_engine()
    logger.info("Quiz portal stopped")


app = FastAPI(
    title="Quiz Portal",
    description="Subject quizzes with graded attempt history",
    version="1.0.0",
    docs_url=_docs_url,
    openapi_url=_openapi_url,
    lifespan=_lifespan,
)

register_exception_handlers(app)

app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(RateLimitMiddleware)
app.add_middleware(RequestLoggingMiddleware)

if Path(settings.STATIC_DIR).is_dir():
    app.mount("/static", StaticFiles(directory=settings.STATIC_DIR), name="static")

app.include_router(pages_router)
app.include_router(auth_router)
app.include_router(assessments_router)


@app.get("/health")
def health_check(db: Session = Depends(get_db)):
    db_ok = False
    try:
        db.execute(text("SELECT 1"))
        db_ok = True
    except SQLAlchemyError:
        logger.warning("Health check could not reach the database")
    return {
        "status": "healthy" if db_ok else "degraded",
        "service": "quizportal",
        "database": db_ok,
    }
