"""Service status endpoint used by the frontend for health checks."""

import logging
from datetime import datetime

import pytz
from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from core.database import get_db

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/status", tags=["Status"])


@router.get("", summary="Server and database status")
def server_status(db: Session = Depends(get_db)) -> dict:
    try:
        db.execute(text("SELECT 1"))
        db_status = "connected"
    except SQLAlchemyError as e:
        logger.warning("Database status check failed: %s", e)
        db_status = "disconnected"
    return {
        "serverStatus": "ok",
        "dbStatus": db_status,
        "timestamp": datetime.now(pytz.utc).isoformat(),
    }
