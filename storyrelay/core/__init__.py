"""Core app configuration, database and security."""

from storyrelay.core.config import get_settings, settings
from storyrelay.core.database import get_db

__all__ = ["get_settings", "settings", "get_db"]
