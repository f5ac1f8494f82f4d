# backend/carecompare/routes/v1/health.py
"""
Health check endpoint.

Used for monitoring application health and database connectivity.
"""

import logging

from fastapi import APIRouter, Depends, Response
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ...api.dependencies.database import get_db
from ...schemas.health import HealthCheckResponse

logger = logging.getLogger(__name__)
router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthCheckResponse)
def health_check(response: Response, db: Session = Depends(get_db)) -> HealthCheckResponse:
    """
    Basic health check endpoint.

    Returns:
        "healthy" when the price store answers, "degraded" otherwise.
    """
    response.headers["Cache-Control"] = "no-store"
    try:
        db.execute(text("SELECT 1"))
        db_ok = True
    except SQLAlchemyError as e:
        logger.error("Database health check failed: %s", e)
        db_ok = False

    return HealthCheckResponse(
        status="healthy" if db_ok else "degraded",
        checks={"database": db_ok},
    )
