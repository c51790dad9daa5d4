"""Database engine, session factory and FastAPI session dependency.

One session per request. Repositories commit or roll back explicitly;
the request-scoped session is always closed when the response is sent.
"""

from typing import Generator

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from .config import settings


def build_engine(database_url: str):
    """Create an engine with pool settings appropriate for the backend.

    Pool sizing only applies to PostgreSQL. SQLite (used by tests and local
    experiments) needs cross-thread access because FastAPI runs sync
    endpoints on a thread pool; in-memory SQLite also needs a single shared
    connection or every checkout would see an empty database.
    """
    engine_kwargs = {
        "pool_pre_ping": True,
        "echo": False,
    }

    if database_url.startswith("sqlite"):
        engine_kwargs["connect_args"] = {"check_same_thread": False}
        if database_url in ("sqlite://", "sqlite:///:memory:"):
            engine_kwargs["poolclass"] = StaticPool
    else:
        engine_kwargs["pool_size"] = settings.DB_POOL_SIZE
        engine_kwargs["max_overflow"] = settings.DB_MAX_OVERFLOW

    return create_engine(database_url, **engine_kwargs)


engine = build_engine(settings.DATABASE_URL)

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)


def get_db() -> Generator[Session, None, None]:
    """Dependency for FastAPI endpoints.

    Usage:
        @router.get("/skus")
        def list_skus(db: Session = Depends(get_db)):
            ...
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
