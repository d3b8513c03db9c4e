"""Filling: strokes that fill space between or around existing geometry."""
