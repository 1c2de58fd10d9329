import logging
from pathlib import Path
from typing import List, Optional

from pydantic_settings import BaseSettings

_PACKAGE_DIR = Path(__file__).resolve().parent.parent

# Values that must never reach a production deployment.
INSECURE_SECRET_KEYS = {"dev-secret-key-change-in-production", "changeme", "secret", ""}


class Settings(BaseSettings):
    # Deployment environment
    DEPLOYMENT_ENV: str = "development"

    # Database
    DATABASE_URL: str = "sqlite:///./quizportal.db"

    # Logging
    LOG_LEVEL: str = "INFO"

    # Security
    SECRET_KEY: str = "dev-secret-key-change-in-production"
    BCRYPT_ROUNDS: int = 10

    # Session cookie
    SESSION_COOKIE_NAME: str = "quizportal_session"
    # None means "secure only in production"; set explicitly to override.
    SESSION_COOKIE_SECURE: Optional[bool] = None
    SESSION_LIFETIME_MINUTES: int = 60 * 24

    # Pages
    VIEWS_DIR: str = str(_PACKAGE_DIR / "views")
    STATIC_DIR: str = str(_PACKAGE_DIR / "static")
    SUBJECTS: List[str] = ["mnst", "mc", "cd", "cns", "ml"]

    # Rate limiting for the credential endpoints (per client IP)
    AUTH_RATE_LIMIT_PER_MINUTE: int = 10

    @property
    def log_level(self) -> int:
        level = logging.getLevelName((self.LOG_LEVEL or "").strip().upper())
        return level if isinstance(level, int) else logging.INFO

    @property
    def is_production(self) -> bool:
        return (self.DEPLOYMENT_ENV or "").strip().lower() == "production"

    @property
    def session_cookie_secure(self) -> bool:
        if self.SESSION_COOKIE_SECURE is None:
            return self.is_production
        return self.SESSION_COOKIE_SECURE

    @property
    def session_max_age_seconds(self) -> int:
        return self.SESSION_LIFETIME_MINUTES * 60

    def model_post_init(self, __context) -> None:
        if self.BCRYPT_ROUNDS < 4 or self.BCRYPT_ROUNDS > 31:
            raise ValueError("BCRYPT_ROUNDS must be between 4 and 31.")
        self.SUBJECTS = [s.strip().lower() for s in self.SUBJECTS if s and s.strip()]

    model_config = {
        "env_file": ".env",
        "extra": "ignore",
    }


settings = Settings()
