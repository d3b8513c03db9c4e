"""Tendril behavior engine."""

from tendril.engine.context import NearbyContext, StrokeEntry
from tendril.engine.registry import Category, ParamSpec, behavior, get_registry

__all__ = [
    "behavior",
    "Category",
    "ParamSpec",
    "get_registry",
    "NearbyContext",
    "StrokeEntry",
]
