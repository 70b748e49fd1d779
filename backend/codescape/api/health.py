"""
Health check endpoints
"""

from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from codescape.core.database import get_store
from codescape.core.logging import get_logger
from codescape.schemas.participant import HealthResponse
from codescape.services.participant_store import ParticipantStore

router = APIRouter()
logger = get_logger(__name__)


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


@router.get("", response_model=HealthResponse)
async def health_check(request: Request) -> Dict[str, Any]:
    """Liveness check; always succeeds."""
    return {
        "success": True,
        "status": "OK",
        "message": f"{request.app.state.settings.APP_NAME} is running!",
        "timestamp": _timestamp(),
    }


@router.get("/ready")
async def readiness_check(store: ParticipantStore = Depends(get_store)):
    """Readiness check including database connectivity."""
    try:
        await store.ping()
        db_status = "connected"
    except Exception as e:
        logger.warning("Readiness check failed", error=str(e))
        db_status = "unavailable"

    ready = db_status == "connected"
    return JSONResponse(
        status_code=200 if ready else 503,
        content={
            "success": ready,
            "status": "ready" if ready else "not ready",
            "database": db_status,
            "timestamp": _timestamp(),
        },
    )
