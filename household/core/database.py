"""Engine and sessions for the household ledger database.

Readings and prices live in one relational store. The URL comes from
``DATABASE_URL``; SQLite is the default for a single household.
"""

from collections.abc import Iterator

from sqlalchemy import create_engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from household.core.config import settings


def _connect_args(url: str) -> dict:
    # SQLite connections are shared between the request threads of the server
    if url.startswith("sqlite"):
        return {"check_same_thread": False}
    return {}


engine = create_engine(settings.DATABASE_URL, connect_args=_connect_args(settings.DATABASE_URL))

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


class Base(DeclarativeBase):
    """Declarative base for the meter reading and utility price tables."""


def get_db() -> Iterator[Session]:
    """Yield a session scoped to one request; the session is closed afterwards.

    Services commit their own work, so nothing is committed here.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
