"""Derived fields over nearby geometry: distance, density, tangents, regions, seeds."""
