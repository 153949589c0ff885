"""Database models for the IntelliBrief backend."""

from .brief import Brief

__all__ = [
    "Brief",
]
