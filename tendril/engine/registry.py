"""Behavior registry: every behavior is a standalone function registered via decorator.

Usage:
    @behavior(
        name="mirror",
        category=Category.COPIES,
        params=[ParamSpec("source", kind="string", required=True), ...],
    )
    def mirror(ctx: NearbyContext, source: str | None, ..., seed: int | None = None):
        ...

Adding a new behavior = creating one file with the decorator. Nothing else changes.
Parameters arrive as loose JSON; coercion clamps and defaults them and never raises.
"""

from __future__ import annotations

import enum
import logging
import math
import re
import time
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable

from tendril.engine.strokes import collect

if TYPE_CHECKING:
    from tendril.engine.context import NearbyContext
    from tendril.models.stroke import Stroke

logger = logging.getLogger(__name__)

_CAMEL_RE = re.compile(r"(?<!^)(?=[A-Z])")
_TRUE_STRINGS = {"true", "1", "yes", "on"}
_FALSE_STRINGS = {"false", "0", "no", "off", ""}
PARAM_KINDS = ("number", "integer", "string", "boolean", "enum")


class Category(enum.IntEnum):
    STRUCTURAL = 0
    FILLING = 1
    COPIES = 2
    REACTIVE = 3
    SHADING = 4
    SPATIAL = 5


def snake_case(name: str) -> str:
    return _CAMEL_RE.sub("_", name).lower()


@dataclass
class ParamSpec:
    """One documented parameter. ``name`` is the wire (JSON) name."""

    name: str
    kind: str = "number"
    default: Any = None
    min: float | None = None
    max: float | None = None
    options: tuple[str, ...] = ()
    required: bool = False
    description: str = ""
    aliases: tuple[str, ...] = ()
    arg: str = ""

    def __post_init__(self) -> None:
        if self.kind not in PARAM_KINDS:
            raise ValueError(f"Unknown parameter kind {self.kind!r} for {self.name}")
        if self.kind == "enum" and not self.options:
            raise ValueError(f"Enum parameter {self.name} needs options")
        if not self.arg:
            self.arg = snake_case(self.name)

    def coerce(self, value: Any) -> Any:
        """Clamp / default a loose value. Never raises."""
        if value is None:
            return self.default
        if self.kind in ("number", "integer"):
            return self._coerce_number(value)
        if self.kind == "boolean":
            return self._coerce_bool(value)
        if self.kind == "enum":
            text = str(value).strip()
            return text if text in self.options else self.default
        text = str(value).strip()
        return text or self.default

    def _coerce_number(self, value: Any) -> Any:
        if isinstance(value, bool):
            return self.default
        try:
            number = float(value)
        except (TypeError, ValueError):
            return self.default
        if not math.isfinite(number):
            return self.default
        if self.min is not None:
            number = max(self.min, number)
        if self.max is not None:
            number = min(self.max, number)
        if self.kind == "integer":
            return int(round(number))
        return number

    def _coerce_bool(self, value: Any) -> Any:
        if isinstance(value, bool):
            return value
        if isinstance(value, (int, float)):
            return value != 0
        text = str(value).strip().lower()
        if text in _TRUE_STRINGS:
            return True
        if text in _FALSE_STRINGS:
            return False
        return self.default

    def describe(self) -> dict[str, Any]:
        info: dict[str, Any] = {"name": self.name, "kind": self.kind, "required": self.required}
        if self.default is not None:
            info["default"] = self.default
        if self.min is not None:
            info["min"] = self.min
        if self.max is not None:
            info["max"] = self.max
        if self.options:
            info["options"] = list(self.options)
        if self.aliases:
            info["aliases"] = list(self.aliases)
        if self.description:
            info["description"] = self.description
        return info


SEED_PARAM = ParamSpec(
    "seed",
    kind="integer",
    min=0,
    max=2**31 - 1,
    description="Noise/random seed; omitted means the configured default seed",
)


@dataclass
class BehaviorSpec:
    name: str
    category: Category
    fn: Callable[..., list["Stroke | None"]]
    params: list[ParamSpec] = field(default_factory=list)
    description: str = ""

    def coerce(self, params: dict[str, Any] | None) -> dict[str, Any]:
        """Loose caller params → keyword arguments for ``fn``. Unknown keys are dropped."""
        params = params or {}
        kwargs: dict[str, Any] = {}
        for spec in self.params:
            raw = None
            for key in (spec.name, *spec.aliases):
                if params.get(key) is not None:
                    raw = params[key]
                    break
            kwargs[spec.arg] = spec.coerce(raw)
        return kwargs

    def describe(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "category": self.category.name.lower(),
            "description": self.description,
            "params": [p.describe() for p in self.params],
        }


class BehaviorRegistry:
    """Singleton registry of all behaviors."""

    def __init__(self) -> None:
        self._behaviors: dict[str, BehaviorSpec] = {}

    def register(self, spec: BehaviorSpec) -> None:
        if spec.name in self._behaviors:
            raise ValueError(f"Duplicate behavior name: {spec.name}")
        self._behaviors[spec.name] = spec
        logger.debug("Registered behavior %s (%s)", spec.name, spec.category.name)

    def get(self, name: str) -> BehaviorSpec:
        try:
            return self._behaviors[name]
        except KeyError:
            raise KeyError(f"Unknown behavior: {name}") from None

    def all(self) -> list[BehaviorSpec]:
        return sorted(self._behaviors.values(), key=lambda s: (s.category, s.name))

    def run(
        self, name: str, ctx: "NearbyContext", params: dict[str, Any] | None = None
    ) -> list["Stroke"]:
        """Coerce params, run the behavior, drop empty results."""
        spec = self.get(name)
        kwargs = spec.coerce(params)
        t0 = time.perf_counter()
        strokes = collect(spec.fn(ctx, **kwargs))
        elapsed = (time.perf_counter() - t0) * 1000
        logger.debug("%s produced %d strokes in %.1fms", name, len(strokes), elapsed)
        return strokes

    def __contains__(self, name: object) -> bool:
        return name in self._behaviors

    @property
    def count(self) -> int:
        return len(self._behaviors)


# Module-level singleton
_registry = BehaviorRegistry()


def get_registry() -> BehaviorRegistry:
    return _registry


def behavior(
    *,
    name: str,
    category: Category,
    params: list[ParamSpec] | None = None,
    description: str = "",
):
    """Decorator to register a behavior function. Every behavior also takes ``seed``."""

    def decorator(fn: Callable[..., list]):
        spec = BehaviorSpec(
            name=name,
            category=category,
            fn=fn,
            params=[*(params or []), SEED_PARAM],
            description=description,
        )
        _registry.register(spec)
        return fn

    return decorator
