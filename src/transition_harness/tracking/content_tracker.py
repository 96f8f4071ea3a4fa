"""
Frame-paced content change tracking.

Polls a content-producing function once per display frame and reports only
values that differ from the previously reported one. Polling follows the
frame clock rather than a fixed interval, so a slow frame simply means a
later poll.

Usage::

    tracker = ContentChangeTracker(scheduler)
    handle = tracker.track(lambda: container.inner_html(), snapshots.append)
    ...
    handle.untrack()

``get_content`` may also return an awaitable (for example a Playwright
``inner_html()`` call). The next frame is then requested only after the
evaluation resolves. The initial value is always delivered exactly once, even
when ``untrack`` is called while its evaluation is still in flight.

A failing evaluation, or a frame the clock cannot deliver, stops tracking.
The failure goes to ``on_error`` when given, and to the scheduler's error
sink otherwise.
"""

import asyncio
import inspect
from collections.abc import Callable
from functools import partial
from typing import Any, Generic, TypeVar

from ..logging import get_logger
from ..scheduling import TaskScheduler

logger = get_logger(__name__)

T = TypeVar("T")


class TrackingHandle(Generic[T]):
    """Polling loop state for one tracked content source.

    Holds the stop flag, the pending scheduler task and the last reported
    value. Each tick checks the stop flag before evaluating and before
    requesting the next frame.
    """

    def __init__(
        self,
        scheduler: TaskScheduler,
        get_content: Callable[[], Any],
        on_content_change: Callable[[T], Any],
        on_error: Callable[[Exception], Any] | None = None,
    ) -> None:
        self._scheduler = scheduler
        self._get_content = get_content
        self._on_content_change = on_content_change
        self._on_error = on_error
        self._stopped = False
        self._pending_task_id: int | None = None
        self._evaluation: asyncio.Future[Any] | None = None
        self._last_content: T | None = None
        self._has_content = False
        self.poll_count = 0
        self.change_count = 0
        self.error: Exception | None = None

    @property
    def active(self) -> bool:
        """Whether polling continues."""
        return not self._stopped

    def untrack(self) -> None:
        """Stop polling. Safe to call more than once."""
        if self._stopped:
            return
        self._stopped = True
        if self._pending_task_id is not None:
            self._scheduler.cancel(self._pending_task_id)
            self._pending_task_id = None
        # An in-flight initial evaluation still owes its value
        if self._evaluation is not None and self._has_content:
            self._evaluation.cancel()
            self._evaluation = None
        logger.debug("content_tracking_stopped", polls=self.poll_count, changes=self.change_count)

    def _tick(self) -> None:
        self._pending_task_id = None
        if self._stopped:
            return
        self.poll_count += 1
        try:
            content = self._get_content()
        except Exception as error:
            self._fail(error)
            return
        if inspect.isawaitable(content):
            self._evaluation = asyncio.ensure_future(content)
            self._evaluation.add_done_callback(self._on_evaluated)
            return
        self._notify_if_changed(content)
        self._schedule_next()

    def _owes_delivery(self) -> bool:
        return not self._stopped or not self._has_content

    def _on_evaluated(self, evaluation: "asyncio.Future[Any]") -> None:
        if evaluation.cancelled():
            return
        if not self._owes_delivery():
            # Discarded poll; its failure no longer matters
            evaluation.exception()
            return
        self._evaluation = None
        # Delivered through the scheduler so failures go to its error sink
        self._pending_task_id = self._scheduler.schedule_delay(
            partial(self._complete_evaluation, evaluation)
        )

    def _complete_evaluation(self, evaluation: "asyncio.Future[Any]") -> None:
        self._pending_task_id = None
        if not self._owes_delivery():
            return
        try:
            content = evaluation.result()
        except Exception as error:
            self._fail(error)
            return
        self._notify_if_changed(content)
        self._schedule_next()

    def _notify_if_changed(self, content: T) -> None:
        if self._has_content and content == self._last_content:
            return
        self._has_content = True
        self._last_content = content
        self.change_count += 1
        self._on_content_change(content)

    def _schedule_next(self) -> None:
        if self._stopped:
            return
        self._pending_task_id = self._scheduler.schedule_frame(self._tick, on_error=self._fail)

    def _fail(self, error: Exception) -> None:
        self._pending_task_id = None
        self.error = error
        self.untrack()
        logger.warning("content_tracking_failed", error=str(error), polls=self.poll_count)
        if self._on_error is None:
            raise error
        self._on_error(error)


class ContentChangeTracker:
    """Turns per-frame polling into change notifications."""

    def __init__(self, scheduler: TaskScheduler) -> None:
        self.scheduler = scheduler

    def track(
        self,
        get_content: Callable[[], Any],
        on_content_change: Callable[[T], Any],
        on_error: Callable[[Exception], Any] | None = None,
    ) -> TrackingHandle[T]:
        """Start tracking ``get_content``.

        The current value is evaluated and delivered immediately; later
        values are delivered only when they differ from the last one.

        Args:
            get_content: Returns the current content, or an awaitable of it
            on_content_change: Receives the first value and every change
            on_error: Receives the failure that stopped tracking; without it
                the failure is raised into the scheduler's error sink

        Returns:
            Handle whose ``untrack`` stops polling
        """
        handle: TrackingHandle[T] = TrackingHandle(
            self.scheduler, get_content, on_content_change, on_error
        )
        handle._tick()
        return handle


def track_content_changes(
    scheduler: TaskScheduler,
    get_content: Callable[[], Any],
    on_content_change: Callable[[T], Any],
    on_error: Callable[[Exception], Any] | None = None,
) -> TrackingHandle[T]:
    """Convenience wrapper around ``ContentChangeTracker.track``."""
    return ContentChangeTracker(scheduler).track(get_content, on_content_change, on_error)
