from datetime import datetime, timezone

from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

# Shared declarative base, all models register here
Base = declarative_base()

# Unbound until init_engine() runs
SessionLocal = sessionmaker(autoflush=False, expire_on_commit=False)

_engine = None


def utcnow():
    """Naive UTC timestamp, the form every table stores."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def init_engine(database_url, echo=False):
    """Create the engine for *database_url* and bind SessionLocal to it."""
    global _engine

    kwargs = {"echo": echo, "future": True}
    if database_url.startswith("sqlite"):
        kwargs["connect_args"] = {"check_same_thread": False}
        # In-memory SQLite must share one connection or each session sees an empty db
        if database_url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool

    _engine = create_engine(database_url, **kwargs)
    SessionLocal.configure(bind=_engine)
    return _engine


def get_engine():
    if _engine is None:
        raise RuntimeError("Database engine not initialised, call init_engine() first")
    return _engine


def init_db():
    """Create all tables if they don't exist"""
    # Import models so they are registered with Base
    import models  # noqa: F401

    Base.metadata.create_all(bind=get_engine())
