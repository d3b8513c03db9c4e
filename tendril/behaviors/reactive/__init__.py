"""Reactive: strokes that answer the shape of existing strokes."""
