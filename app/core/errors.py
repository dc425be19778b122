from fastapi import HTTPException, status
from sqlalchemy.exc import (
    DisconnectionError,
    OperationalError,
    SQLAlchemyError,
    TimeoutError as PoolTimeoutError,
)
import structlog

logger = structlog.get_logger()

# Driver-level failures that mean the store is unreachable rather than that the
# statement was wrong.
UNAVAILABLE_ERRORS = (OperationalError, DisconnectionError, PoolTimeoutError)


def storage_error(exc: SQLAlchemyError, detail: str, **context) -> HTTPException:
    """Log a storage failure in full and return the client-facing error for it."""
    if isinstance(exc, UNAVAILABLE_ERRORS):
        logger.error("Database unavailable", error_type=type(exc).__name__, error=str(exc), **context)
        return HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Service unavailable"
        )

    logger.error(detail, error_type=type(exc).__name__, error=str(exc), **context)
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=detail
    )
