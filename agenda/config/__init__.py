"""Config package - Application settings."""

from agenda.config.settings import Settings, get_settings

__all__ = [
    "Settings",
    "get_settings",
]
