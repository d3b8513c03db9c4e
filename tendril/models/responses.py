"""API response models."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from tendril.models.stroke import Stroke


class HealthResponse(BaseModel):
    status: str = "ok"
    version: str = "0.1.0"
    behaviors_registered: int = 0


class BehaviorInfo(BaseModel):
    name: str
    category: str
    description: str = ""
    params: list[dict[str, Any]] = Field(default_factory=list)


class BehaviorResponse(BaseModel):
    behavior: str
    strokes: list[Stroke] = Field(default_factory=list)
    stroke_count: int = 0
    processing_time_ms: float = 0.0
