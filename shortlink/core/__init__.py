"""Core app configuration, database and errors."""

from shortlink.core.config import get_settings, settings
from shortlink.core.database import get_db

__all__ = ["get_settings", "settings", "get_db"]
