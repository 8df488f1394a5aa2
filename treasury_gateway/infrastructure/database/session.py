"""Database session management with connection pooling"""

import logging
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import create_engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker, Session
from treasury_gateway.config import settings

# Recycle pooled connections after an hour to avoid stale connections
engine = create_engine(
    settings.database_url,
    pool_pre_ping=True,  # Verify connections before using
    pool_size=settings.db_pool_size,
    max_overflow=settings.db_max_overflow,
    pool_recycle=settings.db_pool_recycle_seconds,
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Session:
    """Dependency injection for database sessions"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def transactional(db: Session) -> Iterator[Session]:
    """
    Unit of work: commit everything done inside the block, or nothing.

    Domain errors roll back silently; persistence errors are logged first
    since they are never expected.
    """
    try:
        yield db
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logging.error(f"Unit of work failed: {e}", extra={"step": "commit"})
        raise
    except Exception:
        db.rollback()
        raise
