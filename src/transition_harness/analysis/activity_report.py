"""
Transition timeline reconstruction from container snapshots.

Apart from the initial render, a snapshot is captured whenever the container
content changes. A transition passes through three observable stages:

Stage 1 - applied immediately
    The "base" and "from" classes are added (``enter-active enter`` when
    entering, ``exit-active exit`` when exiting).

Stage 2 - applied on the next frame
    The "from" class is swapped for the "to" class.

Stage 3 - applied after the transition duration
    The "base" and "to" classes are removed.

Every third render therefore closes a transition, and the time between the
render that opened it and the render that closed it is its actual duration.
The closing render may itself open the next transition: when it contains the
enter marker it is stage 1 of an enter transition (out-in switches), and when
it contains the move marker it is the first of the only two stages a list
move transition has (apply move class, remove move class).
"""

from collections import deque
from collections.abc import Sequence
from dataclasses import dataclass, field

from ..exceptions import TransitionTimingError, TriggerMismatchError
from ..formatting import snapshot_diff
from .models import TransitionKind, TransitionRecord, TransitionSnapshot

TRANSITION_STAGES = 3


@dataclass(frozen=True)
class ActivityReport:
    """Human-readable render-by-render report plus the measured transitions."""

    text: str
    transitions: list[TransitionRecord] = field(default_factory=list)

    def __str__(self) -> str:
        return self.text


def classify_snapshot(content: str, enter_marker: str, move_marker: str) -> TransitionKind:
    """Decide what a cycle-closing render starts next."""
    if enter_marker in content:
        return TransitionKind.ENTER
    if move_marker in content:
        return TransitionKind.MOVE
    return TransitionKind.NONE


def duration_within_window(
    actual_duration: float, expected_duration: float, buffer_ms: float
) -> bool:
    """Check ``expected - buffer <= actual <= expected * 2 + buffer``."""
    minimum = expected_duration - buffer_ms
    maximum = expected_duration * 2 + buffer_ms
    return minimum <= actual_duration <= maximum


def elapsed_between(
    snapshots: Sequence[TransitionSnapshot], current: int, previous: int
) -> float:
    """Milliseconds between two captured snapshots."""
    return snapshots[current].recorded_at - snapshots[previous].recorded_at


def build_activity_report(
    snapshots: Sequence[TransitionSnapshot],
    expected_durations: Sequence[float],
    duration_buffer_ms: float = 20.0,
    enter_marker: str = "enter-active",
    move_marker: str = "move-active",
) -> ActivityReport:
    """Walk the snapshots, assert each transition's timing and render the report.

    Args:
        snapshots: Captured snapshots, the first being the initial render
        expected_durations: Minimum duration of each transition, in order
        duration_buffer_ms: Slack on both ends of the acceptance window
        enter_marker: Class substring marking an enter transition
        move_marker: Class substring marking a move transition

    Returns:
        The report and the measured transitions

    Raises:
        TransitionTimingError: A transition fell outside its window
        TriggerMismatchError: More or fewer transitions than durations
    """
    remaining = deque(expected_durations)
    transitions: list[TransitionRecord] = []
    report = ""
    stage = 1
    transition_start = 1

    for render in range(1, len(snapshots)):
        report += f"Render {render}:"

        if stage % TRANSITION_STAGES == 0:
            continues_as = classify_snapshot(snapshots[render].content, enter_marker, move_marker)
            stage = continues_as.stage_restart

            if not remaining:
                raise TriggerMismatchError(
                    expected=len(expected_durations), observed=len(transitions) + 1
                )
            expected_duration = remaining.popleft()
            actual_duration = elapsed_between(snapshots, render, transition_start)
            record = TransitionRecord(
                index=len(transitions) + 1,
                start_render=transition_start,
                end_render=render,
                expected_duration=expected_duration,
                actual_duration=actual_duration,
                continues_as=continues_as,
            )
            if not duration_within_window(actual_duration, expected_duration, duration_buffer_ms):
                raise TransitionTimingError(record.index, expected_duration, actual_duration)

            transitions.append(record)
            report += f" Transition took at least {expected_duration:g}ms"
            transition_start = render

        report += f"\n{snapshot_diff(snapshots[render - 1].content, snapshots[render].content)}\n\n"
        stage += 1

    if remaining:
        raise TriggerMismatchError(expected=len(expected_durations), observed=len(transitions))

    return ActivityReport(text=report.strip(), transitions=transitions)
