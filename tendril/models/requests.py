"""API request models."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from tendril.models.stroke import NearbySnapshot


class BehaviorRequest(BaseModel):
    snapshot: NearbySnapshot = Field(
        default_factory=NearbySnapshot,
        description="Nearby canvas geometry the behavior reacts to",
    )
    params: dict[str, Any] = Field(
        default_factory=dict,
        description="Behavior parameters by wire name; out-of-range values are clamped",
    )
