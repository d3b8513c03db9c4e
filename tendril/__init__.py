"""Tendril: reactive stroke generation over existing canvas geometry."""

__version__ = "0.1.0"
