"""Database engine and session management."""

from collections.abc import Generator

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from config import settings
from db.models import Base


def build_engine(database_url: str):
    """
    Create an engine for the customer store.

    In-memory SQLite gets a single shared connection so every session sees
    the same data for the life of the process. Concurrent sessions then share
    one transaction, so a rollback in one request can discard another
    request's uncommitted writes. Registrations commit under their own lock;
    use a file or server database when traffic is concurrent.
    """
    kwargs = {"echo": settings.debug}
    if database_url.startswith("sqlite"):
        kwargs["connect_args"] = {"check_same_thread": False}
        if database_url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
    else:
        kwargs["pool_pre_ping"] = True
    return create_engine(database_url, **kwargs)


engine = build_engine(settings.database_url)

# Session factory - creates new database sessions
# - expire_on_commit=False: Objects remain usable after commit
SessionLocal = sessionmaker(bind=engine, expire_on_commit=False)


def init_db(bind=None) -> None:
    """Create tables if they don't exist."""
    Base.metadata.create_all(bind=bind or engine)


def get_db_session() -> Generator[Session, None, None]:
    """
    Dependency that provides a database session.

    Usage in FastAPI:
        @router.post("/verify-access")
        def verify(db: Session = Depends(get_db_session)):
            ...

    The session is committed when the request completes, rolled back on error.
    """
    with SessionLocal() as session:
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
