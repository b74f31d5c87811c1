"""Database connection and session management."""

import logging

from sqlalchemy import create_engine, text
from sqlalchemy.exc import DBAPIError
from sqlalchemy.orm import declarative_base, sessionmaker

from influencer_hub.config import settings
from influencer_hub.exceptions import StoreUnavailableError

logger = logging.getLogger(__name__)

# The unification pass is a single-writer batch job, so a plain sync engine
# is used instead of an async one.
database_url = settings.DATABASE_URL.replace(
    "postgresql+asyncpg://", "postgresql://"
)

engine = create_engine(
    database_url,
    echo=settings.LOG_LEVEL == "DEBUG",
    pool_pre_ping=True,
)

SessionLocal = sessionmaker(
    bind=engine,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False
)

# Base class for models
Base = declarative_base()


def get_db():
    """Dependency to get database session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def check_connection(db) -> None:
    """
    Make sure the backing store is reachable.

    Raises:
        StoreUnavailableError: on any connection-level failure
    """
    try:
        db.execute(text("SELECT 1"))
    except DBAPIError as e:
        logger.error(f"Database unreachable: {e}")
        raise StoreUnavailableError(str(e)) from e
