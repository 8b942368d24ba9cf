"""
Application settings.

Provides typed configuration with environment variable overrides.
"""

import os
from dataclasses import dataclass, field
from typing import Optional


# =============================================================================
# Configuration Classes
# =============================================================================


@dataclass(frozen=True)
class RedisSettings:
    """Redis connection settings."""

    host: str = "localhost"
    port: int = 6379
    decode_responses: bool = True


@dataclass(frozen=True)
class MachineSettings:
    """Vending machine service settings."""

    # Plain-text operator PIN
    admin_pin: str = "1234"
    command_channel: str = "vending_machine_commands"

    @property
    def response_channel(self) -> str:
        """Get response channel name."""
        return f"{self.command_channel}_response"


# =============================================================================
# Main Settings
# =============================================================================


@dataclass
class Settings:
    """
    Main application settings.

    Aggregates all configuration sections.
    """

    redis: RedisSettings = field(default_factory=RedisSettings)
    machine: MachineSettings = field(default_factory=MachineSettings)

    @classmethod
    def from_env(cls, environ: Optional[dict[str, str]] = None) -> "Settings":
        """
        Build settings from VENDING_* environment variables.

        Args:
            environ: Environment mapping (defaults to os.environ).

        Returns:
            Settings instance; unset variables keep their defaults.
        """
        env = os.environ if environ is None else environ
        redis_defaults = RedisSettings()
        machine_defaults = MachineSettings()
        return cls(
            redis=RedisSettings(
                host=env.get("VENDING_REDIS_HOST", redis_defaults.host),
                port=int(env.get("VENDING_REDIS_PORT", redis_defaults.port)),
            ),
            machine=MachineSettings(
                admin_pin=env.get("VENDING_ADMIN_PIN", machine_defaults.admin_pin),
                command_channel=env.get(
                    "VENDING_COMMAND_CHANNEL", machine_defaults.command_channel
                ),
            ),
        )


# =============================================================================
# Settings Singleton
# =============================================================================


_settings: Settings | None = None


def get_settings() -> Settings:
    """
    Get application settings singleton.

    Returns:
        Settings instance.
    """
    global _settings
    if _settings is None:
        _settings = Settings.from_env()
    return _settings
