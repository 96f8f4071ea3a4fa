"""Configuration package for the transition harness.

Usage:
    from transition_harness.config import get_settings

    settings = get_settings()
    print(settings.duration_buffer_ms)
"""

from .settings import HarnessSettings, get_settings, reset_settings

__all__ = [
    "HarnessSettings",
    "get_settings",
    "reset_settings",
]
