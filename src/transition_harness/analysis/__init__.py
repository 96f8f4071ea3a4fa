"""Transition activity analysis."""

from .activity_report import (
    TRANSITION_STAGES,
    ActivityReport,
    build_activity_report,
    classify_snapshot,
    duration_within_window,
)
from .models import (
    TransitionContainer,
    TransitionHost,
    TransitionKind,
    TransitionRecord,
    TransitionSnapshot,
    TransitionTrigger,
)
from .transition_analyser import TransitionActivityAnalyser

__all__ = [
    "TRANSITION_STAGES",
    "ActivityReport",
    "TransitionActivityAnalyser",
    "TransitionContainer",
    "TransitionHost",
    "TransitionKind",
    "TransitionRecord",
    "TransitionSnapshot",
    "TransitionTrigger",
    "build_activity_report",
    "classify_snapshot",
    "duration_within_window",
]
