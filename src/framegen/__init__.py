"""Composition analysis and crop suggestion for decoded images."""

__version__ = "0.1.0"
