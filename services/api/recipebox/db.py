"""Database engine and session handling.

The engine is created lazily on first use so tests and migrations can point
the app at another database with init_engine() before any session exists.
"""

from __future__ import annotations

from typing import Iterator, Optional

from sqlalchemy import MetaData, create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from .settings import settings

# Stable constraint names so Alembic autogenerate produces reviewable diffs
NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


class Base(DeclarativeBase):
    metadata = MetaData(naming_convention=NAMING_CONVENTION)


_engine: Optional[Engine] = None
_session_factory: Optional[sessionmaker] = None


def init_engine(database_url: Optional[str] = None) -> Engine:
    global _engine, _session_factory
    url = database_url or settings.database_url
    connect_args = {"check_same_thread": False} if url.startswith("sqlite") else {}
    _engine = create_engine(url, pool_pre_ping=True, connect_args=connect_args)
    _session_factory = sessionmaker(autocommit=False, autoflush=False, bind=_engine)
    return _engine


def get_engine() -> Engine:
    if _engine is None:
        init_engine()
    return _engine


def SessionLocal() -> sessionmaker:
    if _session_factory is None:
        init_engine()
    return _session_factory


def get_db() -> Iterator[Session]:
    """Request-scoped session; always closed, never committed here."""
    db = SessionLocal()()
    try:
        yield db
    finally:
        db.close()
