"""Declarative system configuration engine."""

__version__ = "0.4.0"
