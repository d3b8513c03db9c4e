"""Copies: transformed duplicates of a source stroke."""
