"""Interaktive Verwaltung im Terminal (rich)."""

from frontend.menu import AdminMenu

__all__ = ["AdminMenu"]
