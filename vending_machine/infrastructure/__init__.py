"""
Infrastructure layer - External dependencies and configuration.
"""

from .settings import (
    MachineSettings,
    RedisSettings,
    Settings,
    get_settings,
)


__all__ = [
    "MachineSettings",
    "RedisSettings",
    "Settings",
    "get_settings",
]
