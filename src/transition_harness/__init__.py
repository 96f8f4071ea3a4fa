"""Transition harness: timing-aware verification of CSS transitions.

Schedules frame-paced work, tracks container markup changes and reconstructs
the stage timeline of every transition from the captured snapshots.
"""

from .analysis import (
    ActivityReport,
    TransitionActivityAnalyser,
    TransitionKind,
    TransitionRecord,
    TransitionSnapshot,
    TransitionTrigger,
    build_activity_report,
)
from .config import HarnessSettings, get_settings
from .exceptions import (
    ConfigurationError,
    ContainerNotFoundError,
    HarnessError,
    NoTransitioningElementsError,
    TransitionTimingError,
    TriggerMismatchError,
)
from .formatting import format_html, snapshot_diff
from .scheduling import LoopFrameClock, TaskScheduler
from .tracking import ContentChangeTracker, track_content_changes

__version__ = "0.1.0"

__all__ = [
    "ActivityReport",
    "ConfigurationError",
    "ContainerNotFoundError",
    "ContentChangeTracker",
    "HarnessError",
    "HarnessSettings",
    "LoopFrameClock",
    "NoTransitioningElementsError",
    "TaskScheduler",
    "TransitionActivityAnalyser",
    "TransitionKind",
    "TransitionRecord",
    "TransitionSnapshot",
    "TransitionTimingError",
    "TransitionTrigger",
    "TriggerMismatchError",
    "build_activity_report",
    "format_html",
    "get_settings",
    "snapshot_diff",
    "track_content_changes",
]
