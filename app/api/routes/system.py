"""Liveness and version endpoints polled by the load balancer."""

from fastapi import APIRouter, Request

from api.dependencies.rate_limits import get_limiter
from infrastructure.services import SettingsDep

router = APIRouter(tags=["System"])
limiter = get_limiter()

PROBE_LIMIT = "50/minute"


@router.get("/version")
@limiter.limit(PROBE_LIMIT)
def get_version(request: Request, settings: SettingsDep):  # pylint: disable=unused-argument
    """Deployed git SHA."""
    return {"version": settings.GIT_SHA}


@router.get("/health")
@limiter.limit(PROBE_LIMIT)
def get_health(request: Request):  # pylint: disable=unused-argument
    """Process is up. Vendor health lives under /api/v1/notifications/health."""
    return {"status": "ok"}
