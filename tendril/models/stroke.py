"""Stroke and nearby-snapshot models (the JSON boundary contract)."""

from __future__ import annotations

import math
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from tendril.utils.color import DEFAULT_COLOR, normalize_hex

PressureStyle = Literal["flat", "taper", "taperBoth", "pulse", "default"]
PRESSURE_STYLES: tuple[str, ...] = ("flat", "taper", "taperBoth", "pulse", "default")

DEFAULT_BRUSH_SIZE = 5.0
DEFAULT_OPACITY = 0.9

# Id-like fields older clients put on strokes; folded into ``legacy_ids``.
_LEGACY_ID_FIELDS = ("strokeId", "sourceId", "originalId", "originId", "clientId")
_LEGACY_NESTED_ID_FIELDS = (
    ("meta", "id"),
    ("meta", "sourceId"),
    ("metadata", "id"),
    ("metadata", "sourceId"),
    ("topology", "id"),
    ("topology", "strokeId"),
)


def _id_string(value: Any) -> str | None:
    if value is None or isinstance(value, (dict, list, bool)):
        return None
    text = str(value).strip()
    return text or None


class Point(BaseModel):
    x: float
    y: float
    pressure: float | None = None

    @model_validator(mode="before")
    @classmethod
    def _from_pair(cls, data: Any) -> Any:
        if isinstance(data, (list, tuple)) and len(data) in (2, 3):
            keys = ("x", "y", "pressure")
            return dict(zip(keys, data))
        return data

    @field_validator("pressure")
    @classmethod
    def _clamp_pressure(cls, v: float | None) -> float | None:
        if v is None or not math.isfinite(v):
            return None
        return min(1.0, max(0.0, v))

    @property
    def is_finite(self) -> bool:
        return math.isfinite(self.x) and math.isfinite(self.y)


class Brush(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    color: str = DEFAULT_COLOR
    size: float = DEFAULT_BRUSH_SIZE
    opacity: float = DEFAULT_OPACITY
    pressure_style: PressureStyle = Field(default="default", alias="pressureStyle")

    @field_validator("color", mode="before")
    @classmethod
    def _color(cls, v: Any) -> str:
        return normalize_hex(v if isinstance(v, str) else None)

    @field_validator("size", mode="before")
    @classmethod
    def _size(cls, v: Any) -> float:
        # Missing, zero and junk sizes all mean "default brush"
        try:
            size = float(v)
        except (TypeError, ValueError):
            return DEFAULT_BRUSH_SIZE
        return size if math.isfinite(size) and size > 0 else DEFAULT_BRUSH_SIZE

    @field_validator("opacity", mode="before")
    @classmethod
    def _opacity(cls, v: Any) -> float:
        try:
            opacity = float(v)
        except (TypeError, ValueError):
            return DEFAULT_OPACITY
        if not math.isfinite(opacity) or opacity <= 0:
            return DEFAULT_OPACITY
        return min(1.0, opacity)

    @field_validator("pressure_style", mode="before")
    @classmethod
    def _style(cls, v: Any) -> str:
        return v if v in PRESSURE_STYLES else "default"


class Stroke(BaseModel):
    """One polyline with its brush.

    Accepts the nearby-query shape too: ``path`` instead of ``points`` and
    top-level ``color`` / ``brushSize`` / ``opacity``.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str | None = None
    points: list[Point] = Field(default_factory=list)
    brush: Brush = Field(default_factory=Brush)
    legacy_ids: list[str] = Field(default_factory=list, exclude=True)

    @model_validator(mode="before")
    @classmethod
    def _fold_legacy_fields(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)

        if not data.get("points") and data.get("path"):
            data["points"] = data["path"]
        data.pop("path", None)

        brush = data.get("brush")
        if isinstance(brush, Brush):
            brush = brush.model_dump(by_alias=True)
        brush = dict(brush) if isinstance(brush, dict) else {}
        for legacy, key in (("color", "color"), ("brushSize", "size"), ("opacity", "opacity")):
            value = data.pop(legacy, None)
            if value is not None and not brush.get(key):
                brush[key] = value
        data["brush"] = brush

        legacy_ids: list[str] = []
        for key in _LEGACY_ID_FIELDS:
            value = _id_string(data.pop(key, None))
            if value:
                legacy_ids.append(value)
        for outer, inner in _LEGACY_NESTED_ID_FIELDS:
            nested = data.get(outer)
            if isinstance(nested, dict):
                value = _id_string(nested.get(inner))
                if value:
                    legacy_ids.append(value)
        data["legacy_ids"] = legacy_ids
        data["id"] = _id_string(data.get("id"))
        return data


class AttachPoint(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    x: float
    y: float
    stroke_id: str | None = Field(default=None, alias="strokeId")

    @field_validator("stroke_id", mode="before")
    @classmethod
    def _stringify(cls, v: Any) -> str | None:
        return _id_string(v)


class Summary(BaseModel):
    palette: list[str] = Field(default_factory=list)


class NearbySnapshot(BaseModel):
    """Caller-supplied read-only view of existing canvas geometry."""

    model_config = ConfigDict(populate_by_name=True)

    strokes: list[Stroke] = Field(default_factory=list)
    attach_points: list[AttachPoint] = Field(default_factory=list, alias="attachPoints")
    topology: dict[str, Any] | None = None
    summary: Summary = Field(default_factory=Summary)
