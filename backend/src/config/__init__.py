"""
Configuration module for the calendar backend.

Provides centralized configuration for:
- Database connection URL
- CORS origins
"""

from backend.src.config.settings import AppSettings, get_settings

__all__ = [
    "AppSettings",
    "get_settings",
]
