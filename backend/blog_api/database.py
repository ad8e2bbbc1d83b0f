"""
SQLite database configuration with SQLAlchemy.
WAL mode and enforced foreign keys.
"""

import logging
from contextlib import contextmanager

from sqlalchemy import create_engine, event
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.engine import Engine

from blog_api.config import settings
from blog_api.errors import BlogError, StorageFault, classify_storage_error, translate_storage_error

logger = logging.getLogger(__name__)


# Build database URL
DATABASE_URL = f"sqlite:///{settings.database_path}"

# Engine with SQLite settings
engine = create_engine(
    DATABASE_URL,
    connect_args={
        "check_same_thread": False,  # Allow use in multiple threads
    },
    echo=False,  # Change to True for query debug
)


# Configure WAL mode, busy_timeout and foreign keys via PRAGMA
@event.listens_for(Engine, "connect")
def set_sqlite_pragma(dbapi_conn, connection_record):
    """
    Configure SQLite PRAGMAs on connect:
    - WAL mode for better concurrency
    - busy_timeout to wait for locks
    - foreign_keys so association rows can't reference missing rows
    """
    cursor = dbapi_conn.cursor()
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.execute("PRAGMA synchronous=NORMAL")
    cursor.execute("PRAGMA busy_timeout=5000")
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


# Declarative base for ORM models
Base = declarative_base()

# Session factory. Objects stay loaded after commit; services reload what
# they return inside the unit of work.
SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    expire_on_commit=False,
    bind=engine,
)


def get_db():
    """
    Dependency injection for FastAPI.
    Provides a database session and ensures it's closed after use.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def atomic(
    db: Session,
    action: str,
    not_found_message: str = None,
    failure_message: str = None,
):
    """
    Unit of work: commit everything done inside the block or nothing.

    Any exception rolls the session back. SQLAlchemy errors are re-raised as
    NotFoundError, AssociationReferenceError or PersistenceError.

    Args:
        db: Session owning the transaction
        action: Short description used in log lines ("update post abc")
        not_found_message: Message when the target row does not exist
        failure_message: Generic message for other storage failures
    """
    try:
        yield db
        db.commit()
    except BlogError:
        db.rollback()
        raise
    except SQLAlchemyError as e:
        db.rollback()
        fault = classify_storage_error(e)
        if fault is StorageFault.OTHER:
            logger.error(f"Storage failure during {action}: {e}", exc_info=True)
        else:
            logger.info(f"{action} rejected by storage: {fault.value}")
        raise translate_storage_error(e, not_found_message, failure_message) from e
    except Exception:
        db.rollback()
        raise
