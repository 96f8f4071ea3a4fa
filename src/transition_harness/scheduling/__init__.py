"""Frame-aware task scheduling for the transition harness."""

from .frame_clock import FrameClock, LoopFrameClock
from .task_scheduler import ScheduledTask, TaskKind, TaskScheduler

__all__ = [
    "FrameClock",
    "LoopFrameClock",
    "ScheduledTask",
    "TaskKind",
    "TaskScheduler",
]
