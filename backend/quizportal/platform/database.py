import os
from typing import Generator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from .config import settings


def build_engine(database_url: str) -> Engine:
    engine_kw: dict = {}
    if database_url.startswith("sqlite"):
        # Handlers run in the threadpool; one SQLite connection may cross threads.
        engine_kw = {"connect_args": {"check_same_thread": False}}
    else:
        engine_kw = {"pool_pre_ping": True, "pool_size": 10, "max_overflow": 20}
    return create_engine(database_url, **engine_kw)


# Prefer public DB URL when set (lets a local shell reach a hosted database)
_database_url = os.environ.get("DATABASE_PUBLIC_URL") or settings.DATABASE_URL

engine = build_engine(_database_url)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Generator[Session, None, None]:
    """FastAPI dependency that yields a database session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def dispose_engine() -> None:
    """Release pooled connections; called on application shutdown."""
    engine.dispose()


class Base(DeclarativeBase):
    pass
