"""Health-related API endpoints."""

from __future__ import annotations

from typing import Optional, Tuple

from fastapi import APIRouter, Request
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

import database

router = APIRouter(prefix="/health", tags=["Health"])


def ping_database() -> Tuple[bool, Optional[str]]:
    """Return database connectivity status and optional error message."""
    db = database.SessionLocal()
    try:
        db.execute(text("SELECT 1"))
        return True, None
    except SQLAlchemyError as exc:
        return False, str(exc)
    finally:
        db.close()


@router.get(
    "/status",
    summary="Service runtime status",
    description="Database connectivity plus whether the ask pipeline is wired up.",
)
def read_service_status(request: Request):
    db_ok, db_error = ping_database()
    ask_ready = getattr(request.app.state, "ask_service", None) is not None
    status = "ok" if db_ok and ask_ready else "degraded"
    payload = {"status": status, "database": {"ok": db_ok}, "ask": {"ready": ask_ready}}
    if db_error:
        payload["database"]["error"] = db_error
    return payload


__all__ = ["router", "ping_database"]
