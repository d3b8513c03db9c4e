"""Behavior modules, one per behavior, grouped by category package."""
