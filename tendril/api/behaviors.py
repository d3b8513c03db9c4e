"""GET /api/behaviors and POST /api/behaviors/{name}: discovery and invocation."""

from __future__ import annotations

import logging
import time

from fastapi import APIRouter, HTTPException

from tendril.engine.context import NearbyContext
from tendril.engine.registry import get_registry
from tendril.models.requests import BehaviorRequest
from tendril.models.responses import BehaviorInfo, BehaviorResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/behaviors")


@router.get("", response_model=list[BehaviorInfo])
async def list_behaviors() -> list[BehaviorInfo]:
    return [BehaviorInfo(**spec.describe()) for spec in get_registry().all()]


@router.post("/{name}", response_model=BehaviorResponse)
def run_behavior(name: str, req: BehaviorRequest) -> BehaviorResponse:
    # Plain def: behaviors are CPU-bound, FastAPI runs this in its threadpool
    registry = get_registry()
    if name not in registry:
        raise HTTPException(status_code=404, detail=f"Unknown behavior: {name}")

    start = time.perf_counter()
    ctx = NearbyContext.from_snapshot(req.snapshot)
    strokes = registry.run(name, ctx, req.params)
    elapsed = (time.perf_counter() - start) * 1000
    logger.info("%s: %d strokes from %d nearby in %.1fms", name, len(strokes), len(ctx.strokes), elapsed)

    return BehaviorResponse(
        behavior=name,
        strokes=strokes,
        stroke_count=len(strokes),
        processing_time_ms=round(elapsed, 1),
    )
