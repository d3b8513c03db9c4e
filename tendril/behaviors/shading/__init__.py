"""Shading: light-aware hatching."""
