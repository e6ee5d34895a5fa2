"""Health Probe — liveness endpoint mounted on both services.

Invariants:
    - GET /api/v1/health/ always returns 200 if process is up
    - Reports which service answered (app.state.service_name)
"""

import logging
from fastapi import APIRouter, Request, status

from silkroute import __version__

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/health", tags=["health"])


@router.get("/", status_code=status.HTTP_200_OK)
async def health_check(request: Request):
    """Basic liveness probe. Returns 200 if the process is up."""
    return {
        "status": "healthy",
        "service": request.app.state.service_name,
        "version": __version__,
    }
