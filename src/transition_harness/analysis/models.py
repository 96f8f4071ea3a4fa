"""Data models and collaborator protocols for transition analysis."""

from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any, Protocol

TriggerExecutor = Callable[[Any], Any]


def _no_op(host: Any) -> None:
    return None


@dataclass(frozen=True)
class TransitionTrigger:
    """An action that mutates the container, paired with its minimum duration.

    ``execute`` receives the component under test and may return an
    awaitable. A trigger with a no-op ``execute`` stands for a transition
    that starts on its own as a continuation of the previous one.
    """

    execute: TriggerExecutor
    expected_duration: float

    @classmethod
    def follow_up(cls, expected_duration: float) -> "TransitionTrigger":
        return cls(execute=_no_op, expected_duration=expected_duration)

    @property
    def is_follow_up(self) -> bool:
        return self.execute is _no_op


@dataclass(frozen=True)
class TransitionSnapshot:
    """Formatted container markup at one observed change point."""

    content: str
    recorded_at: float  # milliseconds, scheduler clock


class TransitionKind(Enum):
    """What a cycle-closing render starts next.

    ``stage_restart`` is the stage counter value the state machine resumes
    from: the render that closed the cycle is also the first stage of an
    enter transition, the first of the two stages of a move transition, or
    nothing.
    """

    ENTER = ("enter", 1)
    MOVE = ("move", 2)
    NONE = ("none", 0)

    def __init__(self, label: str, stage_restart: int) -> None:
        self.label = label
        self.stage_restart = stage_restart


@dataclass(frozen=True)
class TransitionRecord:
    """Measured timing of one transition."""

    index: int
    start_render: int
    end_render: int
    expected_duration: float
    actual_duration: float
    continues_as: TransitionKind


class TransitionContainer(Protocol):
    """The element whose content transitions are observed."""

    def inner_html(self) -> str | Awaitable[str]: ...

    async def transitioning_elements(self, duration_marker: str) -> Sequence[Any]: ...

    async def wait_for_transition_end(self, element: Any) -> None: ...


class TransitionHost(Protocol):
    """A rendered component exposing elements by test id."""

    def get_by_test_id(self, test_id: str) -> TransitionContainer | None: ...
