"""Structural: extend, branch, connect and coil existing strokes."""
