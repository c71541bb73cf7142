import logging

from sqlalchemy import create_engine
from sqlalchemy.engine.url import make_url
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from kiliniks.core.config import get_database_url, mask_url_password
from kiliniks.core.db import register_query_timing

logger = logging.getLogger(__name__)

# Create Base class for models
Base = declarative_base()

# Internal lazy globals
_engine = None
_SessionLocal = None
_database_url = None


def get_engine():
    """Return a cached SQLAlchemy engine, creating it from the configured
    database URL on first call. This allows tests to set DATABASE_URL before
    the engine is constructed."""
    global _engine
    global _SessionLocal
    global _database_url
    database_url = get_database_url()
    # If engine not created yet or DATABASE_URL changed, (re)create engine
    if _engine is None or _database_url != database_url:
        if _engine is not None:
            _engine.dispose()
        _SessionLocal = None

        url = make_url(database_url)
        is_postgres = url.drivername.startswith("postgres")

        if is_postgres:
            _engine = create_engine(
                database_url,
                pool_size=10,
                max_overflow=20,
                pool_pre_ping=True,  # Detects and refreshes stale connections
                pool_recycle=3600,
                connect_args={
                    "application_name": "kiliniks",  # Visible in pg_stat_activity
                    "connect_timeout": 10,
                },
                echo=False,  # Controlled by logging config
            )
        elif url.drivername.startswith("sqlite") and url.database in (
            None,
            "",
            ":memory:",
        ):
            # Use a single shared in-memory database across the process
            # so DDL persists across connections.
            _engine = create_engine(
                database_url,
                echo=False,
                connect_args={"check_same_thread": False},
                poolclass=StaticPool,
            )
        else:
            _engine = create_engine(database_url, echo=False)

        register_query_timing(_engine)
        logger.debug(
            "SQLAlchemy engine created",
            extra={
                "context": {
                    "url": mask_url_password(database_url),
                    "dialect": _engine.dialect.name,
                }
            },
        )
        _database_url = database_url
    return _engine


def get_sessionmaker():
    """Return a cached sessionmaker bound to the lazy engine."""
    global _SessionLocal
    engine = get_engine()
    if _SessionLocal is None:
        _SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    return _SessionLocal


def SessionLocal():
    """Calling SessionLocal() returns a new Session bound to the pooled engine."""
    return get_sessionmaker()()


def create_tables():
    """Create all tables in database using the lazy engine."""
    # Ensure models are imported so Base.metadata is populated
    from kiliniks.db import base  # noqa: F401

    Base.metadata.create_all(bind=get_engine())


def drop_tables():
    from kiliniks.db import base  # noqa: F401

    Base.metadata.drop_all(bind=get_engine())


def reset_engine():
    """Dispose the cached engine so the next call rebuilds it."""
    global _engine, _SessionLocal, _database_url
    if _engine is not None:
        _engine.dispose()
    _engine = None
    _SessionLocal = None
    _database_url = None
