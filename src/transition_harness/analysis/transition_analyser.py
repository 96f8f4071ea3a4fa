"""
Transition activity analysis for a rendered component.

The analyser drives a queue of triggers against a component, snapshots its
transition container every time the container markup changes, and turns the
snapshots into a report asserting that every transition took at least its
expected duration.

Usage::

    analyser = (
        TransitionActivityAnalyser(component, scheduler)
        .add_transition_trigger(TransitionTrigger(click_next, expected_duration=100))
        .expect_follow_up_transition(75)
    )
    report = await analyser.analyse_transition_activity()
"""

import asyncio
import inspect
from collections.abc import Callable

from ..config import HarnessSettings, get_settings
from ..exceptions import ContainerNotFoundError, HarnessError, NoTransitioningElementsError
from ..formatting import format_html
from ..logging import get_logger
from ..scheduling import TaskScheduler
from ..tracking import ContentChangeTracker
from .activity_report import build_activity_report
from .models import (
    TransitionContainer,
    TransitionHost,
    TransitionRecord,
    TransitionSnapshot,
    TransitionTrigger,
)

logger = get_logger(__name__)


class TransitionActivityAnalyser:
    """Analyses transition activity of the container marked with the
    configured test id (``data-testid="transition-container"`` by default).
    """

    def __init__(
        self,
        component: TransitionHost,
        scheduler: TaskScheduler | None = None,
        settings: HarnessSettings | None = None,
        formatter: Callable[[str], str] = format_html,
    ) -> None:
        """
        Bind the analyser to a rendered component.

        Args:
            component: Component under test; passed to every trigger
            scheduler: Scheduler for frame waits and content polling
            settings: Harness settings (defaults to the global settings)
            formatter: Markup pretty-printer applied before storing snapshots

        Raises:
            ContainerNotFoundError: The component has no transition container
        """
        self.settings = settings or get_settings()
        self.scheduler = scheduler if scheduler is not None else TaskScheduler()
        self.component = component
        self.container = self._find_transition_container(component)
        self._formatter = formatter
        self._triggers: list[TransitionTrigger] = []
        self.snapshots: list[TransitionSnapshot] = []
        self.transitions: list[TransitionRecord] = []
        self._initial_snapshot: asyncio.Future[None] | None = None
        self._tracking_error: Exception | None = None
        self._analysed = False

    def _find_transition_container(self, component: TransitionHost) -> TransitionContainer:
        test_id = self.settings.container_test_id
        container = component.get_by_test_id(test_id)
        if container is None:
            raise ContainerNotFoundError(test_id)
        return container

    @property
    def triggers(self) -> tuple[TransitionTrigger, ...]:
        return tuple(self._triggers)

    def add_transition_trigger(self, trigger: TransitionTrigger) -> "TransitionActivityAnalyser":
        self._triggers.append(trigger)
        return self

    def expect_follow_up_transition(self, expected_duration: float) -> "TransitionActivityAnalyser":
        """Expect a transition that starts by itself after the previous one."""
        self._triggers.append(TransitionTrigger.follow_up(expected_duration))
        return self

    async def analyse_transition_activity(self) -> str:
        """Run every trigger and report how the container changed.

        Returns:
            The activity report, one diff block per render

        Raises:
            TransitionTimingError: A transition fell outside its duration window
            NoTransitioningElementsError: A trigger started no transition
            TriggerMismatchError: Observed transitions did not match the triggers
        """
        if self._analysed:
            raise HarnessError("Transition activity can only be analysed once per analyser")
        self._analysed = True

        await self._capture_transition_snapshots()

        report = build_activity_report(
            self.snapshots,
            [trigger.expected_duration for trigger in self._triggers],
            duration_buffer_ms=self.settings.duration_buffer_ms,
            enter_marker=self.settings.enter_marker,
            move_marker=self.settings.move_marker,
        )
        self.transitions = report.transitions
        logger.info(
            "transition_activity_analysed",
            renders=len(self.snapshots) - 1,
            transitions=len(report.transitions),
        )
        return report.text

    async def _capture_transition_snapshots(self) -> None:
        self._initial_snapshot = asyncio.get_running_loop().create_future()
        tracker = ContentChangeTracker(self.scheduler)
        handle = tracker.track(
            self.container.inner_html, self._record_snapshot, self._on_tracking_error
        )
        try:
            await self._initial_snapshot
            for index, trigger in enumerate(self._triggers, start=1):
                logger.debug(
                    "transition_trigger_started",
                    trigger=index,
                    follow_up=trigger.is_follow_up,
                    expected_duration=trigger.expected_duration,
                )
                await self._execute_trigger(trigger)
                await self._wait_for_transition_to_complete()
                self._raise_tracking_error()
        finally:
            handle.untrack()
        self._raise_tracking_error()

    def _on_tracking_error(self, error: Exception) -> None:
        self._tracking_error = error
        if self._initial_snapshot is not None and not self._initial_snapshot.done():
            self._initial_snapshot.set_exception(error)

    def _raise_tracking_error(self) -> None:
        # Snapshots stop at a tracking failure, so no report can be built
        if self._tracking_error is not None:
            raise self._tracking_error

    def _record_snapshot(self, content: str) -> None:
        snapshot = TransitionSnapshot(
            content=self._formatter(content),
            recorded_at=self.scheduler.clock.now_ms(),
        )
        self.snapshots.append(snapshot)
        if self._initial_snapshot is not None and not self._initial_snapshot.done():
            self._initial_snapshot.set_result(None)
        logger.debug("snapshot_captured", render=len(self.snapshots) - 1)

    async def _execute_trigger(self, trigger: TransitionTrigger) -> None:
        result = trigger.execute(self.component)
        if inspect.isawaitable(result):
            await result

    async def _wait_for_transition_to_complete(self) -> None:
        # Let the "from" to "to" class swap commit before reading durations
        await self.scheduler.frame_after_next()
        elements = await self.container.transitioning_elements(self.settings.duration_marker)
        if not elements:
            raise NoTransitioningElementsError(self.settings.duration_marker)
        waits = [
            asyncio.ensure_future(self.container.wait_for_transition_end(element))
            for element in elements
        ]
        try:
            await asyncio.gather(*waits)
        except BaseException:
            for wait in waits:
                wait.cancel()
            await asyncio.gather(*waits, return_exceptions=True)
            raise
        # Give the tracker a frame to observe the class cleanup
        await self.scheduler.frame_after_next()
