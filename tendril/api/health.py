"""Health check endpoint."""

from __future__ import annotations

from fastapi import APIRouter

from tendril import __version__
from tendril.engine.registry import get_registry
from tendril.models.responses import HealthResponse

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    return HealthResponse(
        status="ok",
        version=__version__,
        behaviors_registered=get_registry().count,
    )
