"""Roster builder for Fall: A Game of Endings."""

__version__ = "0.1.0"
