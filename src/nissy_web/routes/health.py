"""Liveness probe.

Registered ahead of the static tree, so a public file named ``health`` is
never served; the probe wins.
"""

from fastapi import APIRouter

from ..models import HealthResponse

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    """Liveness probe; answers without touching the solver."""
    return HealthResponse()
