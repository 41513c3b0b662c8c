"""Environment-backed settings."""

from emgcoach.config.settings import Settings, settings

__all__ = ["Settings", "settings"]
