import logging
import time
import uuid
from collections import defaultdict

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse, Response

from .config import settings
from .request_context import reset_request_id, set_request_id

logger = logging.getLogger("quizportal.middleware")

# In-memory rate limit: key -> list of request timestamps (pruned to last window)
_rate_limit_store = defaultdict(list)
_RATE_WINDOW_SEC = 60
_RATE_LIMITED_PATHS = {"/login", "/register"}


def _get_client_ip(request: Request) -> str:
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


def _rate_limit_key(request: Request) -> str:
    if request.method != "POST" or request.url.path not in _RATE_LIMITED_PATHS:
        return ""
    return f"auth:{_get_client_ip(request)}"


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Return 429 when one IP posts credentials too often."""

    async def dispatch(self, request: Request, call_next):
        key = _rate_limit_key(request)
        if not key:
            return await call_next(request)

        now = time.time()
        window_start = now - _RATE_WINDOW_SEC
        store = _rate_limit_store[key]
        store[:] = [t for t in store if t > window_start]
        if len(store) >= settings.AUTH_RATE_LIMIT_PER_MINUTE:
            logger.warning("Rate limit exceeded key=%s path=%s", key, request.url.path)
            return JSONResponse(
                status_code=429,
                content={"error": "Too many requests. Please try again later."},
            )
        store.append(now)
        return await call_next(request)


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Add security-hardening HTTP headers to every response."""

    async def dispatch(self, request: Request, call_next):
        response: Response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        if settings.is_production:
            response.headers["Strict-Transport-Security"] = "max-age=63072000; includeSubDomains"
        return response


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log every request with method, path, status, and duration."""

    async def dispatch(self, request: Request, call_next):
        start_time = time.time()
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        request.state.request_id = request_id
        token = set_request_id(request_id)
        try:
            response = await call_next(request)
        finally:
            reset_request_id(token)

        duration_ms = (time.time() - start_time) * 1000

        if request.url.path != "/health":
            logger.info(
                "method=%s path=%s status=%d duration=%.1fms",
                request.method,
                request.url.path,
                response.status_code,
                duration_ms,
                extra={"request_id": request_id},
            )

        response.headers["X-Process-Time-Ms"] = f"{duration_ms:.1f}"
        response.headers["X-Request-ID"] = request_id

        return response
