"""Configuration management for the transition harness using pydantic-settings.

Values can be supplied through environment variables (``TRANSITION_HARNESS_``
prefix) or a ``.env`` file, and are validated on construction.
"""

from pydantic import Field
from pydantic_settings import BaseSettings


class HarnessSettings(BaseSettings):
    """Main configuration settings for the transition harness."""

    # Timing
    frame_interval_ms: float = Field(
        1000 / 60, gt=0, description="Frame cadence used by the asyncio frame clock"
    )
    duration_buffer_ms: float = Field(
        20.0,
        ge=0,
        description="Slack added to both ends of the transition duration window",
    )

    # Container discovery
    container_test_id: str = Field(
        "transition-container", min_length=1, description="Test id of the transition container"
    )
    test_id_attribute: str = Field(
        "data-testid", min_length=1, description="Attribute carrying element test ids"
    )

    # Marker classes emitted by the transition library under test
    duration_marker: str = Field(
        "duration", min_length=1, description="Substring of the duration-bearing class"
    )
    enter_marker: str = Field(
        "enter-active", min_length=1, description="Class marking an enter transition"
    )
    move_marker: str = Field(
        "move-active", min_length=1, description="Class marking a list move transition"
    )

    # Logging
    debug_mode: bool = Field(False, description="Enable debug logging")
    log_level: str = Field("INFO", description="Log level when debug mode is off")
    structured_logging: bool = Field(False, description="Render logs as JSON")

    class Config:
        """Pydantic configuration."""

        env_file = ".env"
        env_prefix = "TRANSITION_HARNESS_"
        case_sensitive = False
        extra = "forbid"

    @property
    def effective_log_level(self) -> str:
        return "DEBUG" if self.debug_mode else self.log_level.upper()


# Singleton instance
_settings: HarnessSettings | None = None


def get_settings() -> HarnessSettings:
    """Get the singleton settings instance.

    Returns:
        HarnessSettings instance
    """
    global _settings

    if _settings is None:
        _settings = HarnessSettings()

    return _settings


def reset_settings() -> None:
    """Reset the settings singleton (mainly for testing)."""
    global _settings
    _settings = None
