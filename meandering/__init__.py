"""Meandering Sleep backend: audio catalog management and lecture generation."""

__version__ = "0.1.0"
