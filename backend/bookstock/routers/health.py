"""Health check endpoints for load balancers and monitoring."""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from bookstock.config import Settings
from bookstock.deps import get_recorder, get_settings, get_store
from bookstock.middleware.exceptions import StoreError
from bookstock.services.store import RecordStore
from bookstock.utils.activity import ActivityRecorder

router = APIRouter(tags=["health"])


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


@router.get("/")
async def api_root():
    return {"message": "Welcome to the Stock API!"}


@router.get("/health")
async def health_check(app_settings: Settings = Depends(get_settings)):
    """Lightweight liveness check (no database access)."""
    return {
        "status": "ok",
        "service": "Bookstock",
        "timestamp": _now(),
        "environment": app_settings.environment,
    }


@router.get("/health/ready")
async def readiness_check(
    store: RecordStore = Depends(get_store),
    recorder: ActivityRecorder = Depends(get_recorder),
):
    """Readiness check: the database must answer.

    Activity recording failures are reported but do not make the service
    unready.
    """
    checks = {
        "service": "ok",
        "database": "unknown",
    }
    overall_healthy = True

    try:
        await store.ping()
        checks["database"] = "ok"
    except StoreError as e:
        checks["database"] = f"error: {str(e.details or e.message)[:100]}"
        overall_healthy = False

    return JSONResponse(
        status_code=status.HTTP_200_OK if overall_healthy else status.HTTP_503_SERVICE_UNAVAILABLE,
        content={
            "status": "healthy" if overall_healthy else "unhealthy",
            "service": "Bookstock",
            "checks": checks,
            "activity_failures": recorder.failures,
            "timestamp": _now(),
        },
    )
