"""Belegungs- und Bewertungsmodul."""

from .registry import AcademicRegistry

__all__ = [
    "AcademicRegistry",
]
