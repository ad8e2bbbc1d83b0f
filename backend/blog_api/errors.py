"""
Domain error taxonomy and storage error translation.

Storage failures are classified into a closed set of faults and turned into
exactly one of three domain errors before they leave the service layer.
"""
import enum
import logging

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError, NoResultFound
from sqlalchemy.orm.exc import StaleDataError

logger = logging.getLogger(__name__)

# SQLSTATE for foreign_key_violation (PostgreSQL and other SQL-standard drivers)
FOREIGN_KEY_SQLSTATE = "23503"
SQLITE_FOREIGN_KEY_MESSAGE = "FOREIGN KEY constraint failed"


class BlogError(Exception):
    """Base class for errors surfaced to API callers"""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "internal error"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class NotFoundError(BlogError):
    """Operation targeted an id that does not exist"""
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "not found"


class AssociationReferenceError(BlogError):
    """Desired category set names at least one nonexistent category"""
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "one or more referenced categories do not exist"


class PersistenceError(BlogError):
    """Any other storage failure. Not retried by this layer."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "storage operation failed"


class StorageFault(str, enum.Enum):
    FOREIGN_KEY_VIOLATION = "foreign_key_violation"
    RECORD_NOT_FOUND = "record_not_found"
    OTHER = "other"


def _sqlstate(driver_error) -> str:
    # psycopg 3 exposes .sqlstate, psycopg2 exposes .pgcode
    return getattr(driver_error, "sqlstate", None) or getattr(driver_error, "pgcode", None)


def classify_storage_error(exc: Exception) -> StorageFault:
    """Map an SQLAlchemy/driver exception to a StorageFault."""
    if isinstance(exc, NoResultFound):
        return StorageFault.RECORD_NOT_FOUND

    # Flush matched 0 rows: another writer removed the row after it was loaded
    if isinstance(exc, StaleDataError):
        return StorageFault.RECORD_NOT_FOUND

    if isinstance(exc, IntegrityError):
        driver_error = exc.orig
        if _sqlstate(driver_error) == FOREIGN_KEY_SQLSTATE:
            return StorageFault.FOREIGN_KEY_VIOLATION
        if SQLITE_FOREIGN_KEY_MESSAGE in str(driver_error):
            return StorageFault.FOREIGN_KEY_VIOLATION

    return StorageFault.OTHER


def translate_storage_error(
    exc: Exception,
    not_found_message: str = None,
    failure_message: str = None,
) -> BlogError:
    """
    Build the domain error for a storage exception.

    Args:
        exc: Exception raised by SQLAlchemy or the DB driver
        not_found_message: Message for RECORD_NOT_FOUND
        failure_message: Generic message for everything else

    Returns:
        NotFoundError, AssociationReferenceError or PersistenceError
    """
    fault = classify_storage_error(exc)

    if fault is StorageFault.FOREIGN_KEY_VIOLATION:
        return AssociationReferenceError()
    if fault is StorageFault.RECORD_NOT_FOUND:
        return NotFoundError(not_found_message)
    return PersistenceError(failure_message)


# === Exception handlers ===

async def blog_error_handler(request: Request, exc: BlogError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    else:
        logger.warning(f"{request.method} {request.url.path} rejected: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


async def validation_error_handler(request: Request, exc: RequestValidationError):
    logger.warning(f"Validation error on {request.url.path}: {exc.errors()}")
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "error": "invalid request body",
            "details": jsonable_errors(exc),
        },
    )


def jsonable_errors(exc: RequestValidationError) -> list:
    """Validation errors without the raw input/ctx objects (not always JSON safe)."""
    return [
        {"loc": list(error.get("loc", ())), "msg": error.get("msg"), "type": error.get("type")}
        for error in exc.errors()
    ]
