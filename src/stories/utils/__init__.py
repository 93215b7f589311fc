"""Utility modules for stories."""

from .logging import resolve_level, setup_logging

__all__ = [
    "resolve_level",
    "setup_logging",
]
