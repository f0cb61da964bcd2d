import logging

from sqlalchemy import create_engine
from sqlalchemy.engine.url import make_url
from sqlalchemy.exc import ArgumentError
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from barberboss.core import config

logger = logging.getLogger(__name__)

# Create Base class for models
Base = declarative_base()

# Internal lazy globals
_engine = None
_SessionLocal = None
_database_url = None


def _build_engine(database_url: str):
    try:
        url = make_url(database_url)
        is_postgres = url.drivername.startswith("postgres")
    except ArgumentError:
        # Unparseable URL: let create_engine report it, without Postgres args
        is_postgres = False

    if is_postgres:
        return create_engine(
            database_url,
            pool_size=10,
            max_overflow=20,
            pool_pre_ping=True,  # Detects and refreshes stale connections
            pool_recycle=3600,
            connect_args={
                "application_name": "barberboss",  # Visible in pg_stat_activity
                "connect_timeout": 10,
            },
            echo=False,
        )

    if database_url.startswith("sqlite") and ":memory:" in database_url:
        # One shared in-memory database per process so DDL survives
        # across connections (tests create tables then open new sessions).
        return create_engine(
            database_url,
            echo=False,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )

    return create_engine(database_url, echo=False)


def get_engine():
    """Return a cached SQLAlchemy engine, creating it from DATABASE_URL on
    first call. This allows tests to set DATABASE_URL before the engine is
    constructed."""
    global _engine
    global _database_url
    global _SessionLocal
    database_url = config.get_database_url()
    # If engine not created yet or DATABASE_URL changed, (re)create engine
    if _engine is None or _database_url != database_url:
        if _engine is not None:
            _engine.dispose()
        _engine = _build_engine(database_url)
        _SessionLocal = None
        _database_url = database_url
        logger.debug(
            "SQLAlchemy engine created",
            extra={"context": {"dialect": _engine.dialect.name}},
        )
    return _engine


def get_sessionmaker():
    """Return a cached sessionmaker bound to the lazy engine."""
    global _SessionLocal
    engine = get_engine()
    if _SessionLocal is None:
        _SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    return _SessionLocal


def SessionLocal():
    """Calling SessionLocal() returns a new Session instance."""
    return get_sessionmaker()()


def create_tables():
    """Create all tables in database using the lazy engine."""
    # Models must be imported so Base.metadata is populated
    from barberboss.db import base  # noqa: F401

    Base.metadata.create_all(bind=get_engine())
