"""Translate domain failures into HTTP responses"""

import logging

from fastapi import HTTPException
from sqlalchemy.orm import Session

from daily_budget.domain.exceptions import NotFoundError, StorageError


def fail(db: Session, error: Exception, request_id: str) -> HTTPException:
    """Roll back the request's writes and build the matching HTTPException"""
    db.rollback()

    if isinstance(error, NotFoundError):
        logging.warning(f"Not found: {error}", extra={"request_id": request_id})
        return HTTPException(status_code=404, detail=str(error))

    if isinstance(error, StorageError):
        logging.error(f"Storage error: {error}", extra={"request_id": request_id})
        return HTTPException(status_code=503, detail="Storage unavailable")

    logging.error(f"Unexpected error: {error}", extra={"request_id": request_id})
    return HTTPException(status_code=500, detail="Internal server error")
