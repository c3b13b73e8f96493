"""
Liveness and readiness probes.
"""

from datetime import datetime, timezone

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

router = APIRouter(tags=["Health"])


@router.get("/live")
def live():
    """The process is up."""
    return {"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()}


@router.get("/ready")
def ready(request: Request):
    """Ready once the store adapter has been initialized."""
    if getattr(request.app.state, "catalog", None) is None:
        return JSONResponse(status_code=503, content={"status": "starting"})
    return {"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()}
