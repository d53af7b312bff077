"""Health check endpoint."""

import logging
from datetime import datetime, timezone
from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from adapter.mongodb.connection import get_mongodb_client
from api.dependencies import get_session_store
from port.session_store import SessionStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/health", tags=["health"])


def _check_mongodb() -> dict:
    try:
        mongo_client = get_mongodb_client()
        if mongo_client:
            mongo_client.admin.command('ping')
            return {"status": "healthy", "message": "Connection successful"}
        return {"status": "unhealthy", "message": "Connection failed or not configured"}
    except Exception as e:
        return {"status": "unhealthy", "message": f"Connection error: {str(e)[:200]}"}


def _check_sessions(sessions: SessionStore) -> dict:
    ping = getattr(sessions, "ping", None)
    if ping is None:
        return {"status": "healthy", "message": "In-process store"}
    if ping():
        return {"status": "healthy", "message": "Connection successful"}
    return {"status": "unhealthy", "message": "Connection failed or not configured"}


@router.get("")
async def health(sessions: SessionStore = Depends(get_session_store)):
    """Health check endpoint with dependency status."""
    services = {
        "mongodb": _check_mongodb(),
        "sessions": _check_sessions(sessions),
    }
    overall_healthy = all(s["status"] == "healthy" for s in services.values())

    if not overall_healthy:
        logger.warning("Health check degraded", extra={"services": services})

    return JSONResponse(
        content={
            "status": "healthy" if overall_healthy else "degraded",
            "timestamp": datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z'),
            "services": services,
        },
        status_code=status.HTTP_200_OK if overall_healthy else status.HTTP_503_SERVICE_UNAVAILABLE,
    )
