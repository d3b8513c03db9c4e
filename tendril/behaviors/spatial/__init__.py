"""Spatial: growth simulators exposed as behaviors."""
