"""Pydantic models for the stroke JSON contract and the HTTP surface."""
