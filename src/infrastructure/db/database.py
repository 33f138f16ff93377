"""
Database connection management.

Supports:
  - SQLite (local dev, no setup; ":memory:" for tests)
  - PostgreSQL (Docker / managed)

Connection string comes from settings.database_url (DATABASE_URL env var).
"""

import logging
from contextlib import contextmanager

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

from src.config.settings import get_settings
from src.infrastructure.db.models import Base

logger = logging.getLogger(__name__)


def get_database_url() -> str:
    """Get database URL from settings."""
    return get_settings().database_url


def create_db_engine(url: str = None):
    """Create SQLAlchemy engine."""
    db_url = url or get_database_url()

    if db_url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}, "echo": False}
        if ":memory:" in db_url or db_url == "sqlite://":
            # one shared connection, otherwise every session sees an empty DB
            kwargs["poolclass"] = StaticPool
        engine = create_engine(db_url, **kwargs)
    else:
        # PostgreSQL
        engine = create_engine(
            db_url,
            pool_size=10,
            max_overflow=20,
            pool_pre_ping=True,
            echo=False,
        )

    return engine


# ── Global engine & session factory ──
_engine = None
_SessionFactory = None


def get_engine():
    """Get or create the global engine."""
    global _engine
    if _engine is None:
        _engine = create_db_engine()
    return _engine


def get_session_factory():
    """Get or create the session factory."""
    global _SessionFactory
    if _SessionFactory is None:
        _SessionFactory = make_session_factory(get_engine())
    return _SessionFactory


def make_session_factory(engine) -> sessionmaker:
    return sessionmaker(bind=engine, expire_on_commit=False)


def init_db(engine=None):
    """Create all tables. Safe to call multiple times."""
    engine = engine or get_engine()
    Base.metadata.create_all(engine)
    url = engine.url.render_as_string(hide_password=True)
    logger.info(f"Database initialized: {url.split('@')[-1] if '@' in url else url}")


@contextmanager
def get_db(factory: sessionmaker | None = None) -> Session:
    """Context manager for database sessions."""
    factory = factory or get_session_factory()
    session = factory()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
