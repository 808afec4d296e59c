"""
Database engine and session handling for Bar Archive.

The engine points at the configured SQLite file unless a URL is given.
Service functions open their own transaction with session_scope() when the
caller does not pass a session.
"""

import logging
from contextlib import contextmanager
from typing import Iterator, Optional

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from bar_archive.models.base import Base
from bar_archive.utils.config import get_config

logger = logging.getLogger(__name__)

_engine: Optional[Engine] = None
_session_factory: Optional[sessionmaker] = None


@event.listens_for(Engine, "connect")
def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    # SQLite ignores FOREIGN KEY and ON DELETE clauses unless this is on
    if type(dbapi_connection).__module__.startswith("sqlite3"):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def create_database_engine(database_url: Optional[str] = None, echo: bool = False) -> Engine:
    """
    Build an engine for the given URL (default: the configured database file).

    In-memory SQLite URLs get a StaticPool so every session sees the same
    database.
    """
    url = database_url or get_config().database_url
    logger.info(f"Creating database engine: {url}")

    if ":memory:" in url or "mode=memory" in url:
        return create_engine(
            url,
            echo=echo,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    return create_engine(url, echo=echo, connect_args={"check_same_thread": False, "timeout": 30})


def get_engine() -> Engine:
    """Process-wide engine, created on first use."""
    global _engine
    if _engine is None:
        _engine = create_database_engine()
    return _engine


def init_database(engine: Optional[Engine] = None) -> None:
    """Create any missing tables. Safe to call on an existing database."""
    # Importing the package registers every model on Base.metadata
    from bar_archive import models  # noqa: F401

    engine = engine or get_engine()
    Base.metadata.create_all(engine)
    logger.info("Database tables initialized")


def get_session_factory() -> sessionmaker:
    """Process-wide session factory bound to get_engine()."""
    global _session_factory
    if _session_factory is None:
        _session_factory = sessionmaker(bind=get_engine(), expire_on_commit=False)
    return _session_factory


def get_session() -> Session:
    """New session from the current factory. The caller closes it."""
    return get_session_factory()()


@contextmanager
def session_scope() -> Iterator[Session]:
    """
    Transactional scope: commit on success, roll back on error, always close.

    Example:
        with session_scope() as session:
            bar = session.get(Bar, bar_id)
    """
    session = get_session()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
