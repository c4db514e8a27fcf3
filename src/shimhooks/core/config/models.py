"""
Configuration data models for shimhooks.

These models define the structure of .shimhooks.json and
~/.config/shimhooks/config.json files, with validation via Pydantic.
"""

import logging

from pydantic import BaseModel, ConfigDict, Field, field_validator

LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


class HooksConfig(BaseModel):
    """
    Lifecycle hooks configuration.

    Disabling hooks turns every phase into a no-op success.
    """
    enabled: bool = Field(
        default=True,
        description="Enable/disable all hooks"
    )


class LoggingConfig(BaseModel):
    """Log output settings for the command line."""
    level: str = Field(
        default="WARNING",
        description="Log level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )
    format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="logging format string"
    )

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Normalize and check the level name."""
        level = v.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"level must be one of {', '.join(LOG_LEVELS)}, got {v!r}")
        return level

    @property
    def level_number(self) -> int:
        return logging.getLevelName(self.level)


class ShimHooksConfig(BaseModel):
    """
    Complete shimhooks configuration.

    Merged from defaults, user config, project config and env vars.
    """
    model_config = ConfigDict(extra="ignore")

    hooks: HooksConfig = Field(default_factory=HooksConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
