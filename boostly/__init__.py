"""Boostly: a deadline-based focus/break session timer."""

__version__ = "0.1.0"
