"""
Observability helpers.

Times store operations and emits one structured log record per call.
"""

import time
import logging
from contextlib import asynccontextmanager

from parcels.app.core.exceptions import AppException, StorageError

# Configure structured logger
logger = logging.getLogger("parcels")


def configure_logging(level: str = "INFO") -> None:
    """Attach a basic stream handler; used by scripts, not by the store."""
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


@asynccontextmanager
async def observe(operation: str, **fields):
    """
    Log the outcome and duration of one store operation.
    
    Domain errors are logged at WARNING, storage failures at ERROR.
    Exceptions are always re-raised.
    """
    start_time = time.perf_counter()
    log_data = {"operation": operation, **fields}
    try:
        yield log_data
    except StorageError as exc:
        log_data["duration_ms"] = round((time.perf_counter() - start_time) * 1000, 2)
        log_data["error_code"] = exc.error_code
        logger.error("Parcel operation failed", extra=log_data)
        raise
    except AppException as exc:
        log_data["duration_ms"] = round((time.perf_counter() - start_time) * 1000, 2)
        log_data["error_code"] = exc.error_code
        logger.warning("Parcel operation rejected", extra=log_data)
        raise
    log_data["duration_ms"] = round((time.perf_counter() - start_time) * 1000, 2)
    logger.info("Parcel operation", extra=log_data)
