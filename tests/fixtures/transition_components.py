"""
Simulated transition components for end-to-end analyser tests.

``StagedTransitions`` applies classes in the same three stages as the
transition library under test: base and "from" classes immediately, the
"to" class after a full frame, and cleanup (plus a ``transitionend`` event)
once the ``duration-N`` class's duration has elapsed. Every stage runs on the
same scheduler the analyser uses.
"""

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from itertools import groupby

from transition_harness.scheduling import TaskScheduler

from .fake_dom import FakeElement, FakeTransitionContainer

CONTAINER_TEST_ID = "transition-container"


@dataclass(frozen=True)
class TransitionClasses:
    enter_active: str
    enter: str
    enter_to: str
    exit_active: str
    exit: str
    exit_to: str
    move: str

    @classmethod
    def with_durations(
        cls,
        enter_duration: float | None = None,
        exit_duration: float | None = None,
        move_duration: float | None = None,
    ) -> "TransitionClasses":
        return cls(
            enter_active=f"duration-{_duration_label(enter_duration)} enter-active",
            enter="opacity-0 enter",
            enter_to="opacity-100 enter-to",
            exit_active=f"duration-{_duration_label(exit_duration)} exit-active",
            exit="opacity-100 exit",
            exit_to="opacity-0 exit-to",
            move=f"duration-{_duration_label(move_duration)} move-active",
        )


def _duration_label(duration: float | None) -> str:
    return "undefined" if duration is None else f"{duration:g}"


class StagedTransitions:
    """Applies enter, exit and move class stages to fake elements."""

    def __init__(self, scheduler: TaskScheduler, classes: TransitionClasses) -> None:
        self.scheduler = scheduler
        self.classes = classes

    def run(
        self,
        entering: Sequence[FakeElement] = (),
        exiting: Sequence[FakeElement] = (),
        on_complete: Callable[[], None] | None = None,
    ) -> None:
        """Transition elements in (already attached) and out (removed when done)."""
        classes = self.classes
        for element in entering:
            element.add_classes(classes.enter_active, classes.enter)
        for element in exiting:
            element.add_classes(classes.exit_active, classes.exit)

        def swap() -> None:
            for element in entering:
                element.remove_classes(classes.enter)
                element.add_classes(classes.enter_to)
            for element in exiting:
                element.remove_classes(classes.exit)
                element.add_classes(classes.exit_to)
            self._finish_after_durations(list(entering), list(exiting), on_complete)

        self.scheduler.schedule_frame_after_next(swap)

    def move(self, elements: Sequence[FakeElement]) -> None:
        """Apply the move class, then clear it once its duration has elapsed."""
        for element in elements:
            element.add_classes(self.classes.move)

        def finish() -> None:
            for element in elements:
                element.remove_classes(self.classes.move)
            for element in elements:
                element.dispatch_event("transitionend")

        delay = max((element.transition_duration_ms for element in elements), default=0)
        self.scheduler.schedule_delay(finish, delay)

    def _finish_after_durations(
        self,
        entering: list[FakeElement],
        exiting: list[FakeElement],
        on_complete: Callable[[], None] | None,
    ) -> None:
        elements = entering + exiting
        groups = [
            list(group)
            for _, group in groupby(
                sorted(elements, key=lambda el: el.transition_duration_ms),
                key=lambda el: el.transition_duration_ms,
            )
        ]
        remaining = len(groups)

        def finish(group: list[FakeElement]) -> None:
            nonlocal remaining
            for element in group:
                if element in entering:
                    element.remove_classes(self.classes.enter_active, self.classes.enter_to)
                else:
                    element.remove_classes(self.classes.exit_active, self.classes.exit_to)
                element.dispatch_event("transitionend")
                if element in exiting:
                    element.remove()
            remaining -= 1
            if remaining == 0 and on_complete is not None:
                on_complete()

        for group in groups:
            self.scheduler.schedule_delay(
                lambda group=group: finish(group), group[0].transition_duration_ms
            )


class FakeComponent:
    """Rendered component with a transition container and clickable buttons."""

    def __init__(self, scheduler: TaskScheduler, classes: TransitionClasses) -> None:
        self.root = FakeElement("body")
        self.container = FakeElement("div", attributes={"data-testid": CONTAINER_TEST_ID})
        self.root.append(self.container)
        self.transitions = StagedTransitions(scheduler, classes)
        self.scheduler = scheduler
        self.buttons: dict[str, Callable[[], None]] = {}

    def get_by_test_id(self, test_id: str) -> FakeTransitionContainer | None:
        element = self.root.find_by_test_id(test_id)
        return FakeTransitionContainer(element) if element is not None else None

    def click(self, test_id: str) -> None:
        self.buttons[test_id]()


class ToggleItemTransition(FakeComponent):
    """Shows or hides a single item."""

    def __init__(
        self,
        scheduler: TaskScheduler,
        show: bool,
        enter_duration: float | None = None,
        exit_duration: float | None = None,
    ) -> None:
        super().__init__(scheduler, TransitionClasses.with_durations(enter_duration, exit_duration))
        self.item: FakeElement | None = self._create_item() if show else None
        if self.item is not None:
            self.container.append(self.item)
        self.buttons["toggle"] = self.toggle

    @staticmethod
    def _create_item() -> FakeElement:
        return FakeElement("div", children=[FakeElement("span", text="Hello!")])

    def toggle(self) -> None:
        if self.item is None:
            self.item = self._create_item()
            self.container.append(self.item)
            self.transitions.run(entering=[self.item])
        else:
            item, self.item = self.item, None
            self.transitions.run(exiting=[item])


class SwitchItemTransition(FakeComponent):
    """Replaces the current page with the next one.

    Modes: ``"outin"`` exits the old page before the new one enters,
    ``"inout"`` enters the new page first, and ``"parallel"`` does both at once.
    """

    def __init__(
        self,
        scheduler: TaskScheduler,
        enter_duration: float | None = None,
        exit_duration: float | None = None,
        mode: str = "parallel",
    ) -> None:
        super().__init__(scheduler, TransitionClasses.with_durations(enter_duration, exit_duration))
        self.mode = mode
        self.page = 1
        self.current = self._create_page(self.page)
        self.container.append(self.current)
        self.buttons["next"] = self.next

    @staticmethod
    def _create_page(page: int) -> FakeElement:
        return FakeElement("div", text=str(page))

    def next(self) -> None:
        self.page += 1
        old, new = self.current, self._create_page(self.page)
        self.current = new

        def enter_new() -> None:
            self.container.append(new)
            self.transitions.run(entering=[new])

        if self.mode == "outin":
            self.transitions.run(exiting=[old], on_complete=enter_new)
        elif self.mode == "inout":
            self.container.append(new)
            self.transitions.run(
                entering=[new],
                on_complete=lambda: self.scheduler.schedule_frame_after_next(
                    lambda: self.transitions.run(exiting=[old])
                ),
            )
        else:
            self.container.append(new)
            self.transitions.run(entering=[new], exiting=[old])


class ListTransition(FakeComponent):
    """A list of items that can grow at the end or shrink from the front."""

    def __init__(
        self,
        scheduler: TaskScheduler,
        enter_duration: float | None = None,
        exit_duration: float | None = None,
        move_duration: float | None = None,
    ) -> None:
        super().__init__(
            scheduler,
            TransitionClasses.with_durations(enter_duration, exit_duration, move_duration),
        )
        self.next_value = 4
        for value in range(1, 5):
            self.container.append(self._create_item(value))
        self.buttons["append-two"] = self.append_two
        self.buttons["remove-first-two"] = self.remove_first_two

    @staticmethod
    def _create_item(value: int) -> FakeElement:
        return FakeElement("div", classes=f"value-{value}", children=[FakeElement("span", text=str(value))])

    def append_two(self) -> None:
        added = []
        for _ in range(2):
            self.next_value += 1
            item = self._create_item(self.next_value)
            self.container.append(item)
            added.append(item)
        self.transitions.run(entering=added)

    def remove_first_two(self) -> None:
        removed = self.container.children[:2]
        remaining = self.container.children[2:]
        self.transitions.run(
            exiting=removed,
            on_complete=lambda: self.transitions.move(remaining),
        )
