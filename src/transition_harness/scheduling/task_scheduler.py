"""Task scheduler for frame-driven and delay-driven callbacks.

Every outstanding callback is registered under an integer task id until it
completes or is cancelled. Callback failures are reported to an error sink and
never escape into the frame clock or the caller.

A frame the clock fails to deliver also ends its task: the failure goes to the
task's ``on_error`` hook when one was given, and to the error sink otherwise.
Futures returned by ``next_frame``, ``frame_after_next`` and ``sleep`` are
rejected with that failure.
"""

import asyncio
import itertools
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any

from ..logging import get_logger
from .frame_clock import FrameClock, LoopFrameClock

logger = get_logger(__name__)

TaskCallback = Callable[[], Any]
ErrorSink = Callable[[int, Exception], None]
FailureHook = Callable[[Exception], None]


class TaskKind(Enum):
    """How a scheduled task is driven."""

    FRAME = "frame"
    FRAME_AFTER_NEXT = "frame_after_next"
    DELAY = "delay"


@dataclass
class ScheduledTask:
    """An outstanding callback in the scheduler registry."""

    id: int
    kind: TaskKind
    cancel: Callable[[], None]
    on_error: FailureHook | None = None


class TaskScheduler:
    """Registry of deferred callbacks behind a single cancellation model.

    Create one scheduler per analysis (or per test) and pass it to every
    component that schedules work; ``cancel_all`` then tears down everything
    that component tree left behind.
    """

    def __init__(
        self,
        clock: FrameClock | None = None,
        error_sink: ErrorSink | None = None,
    ) -> None:
        """Initialize the scheduler.

        Args:
            clock: Frame and timer source (defaults to an asyncio frame clock)
            error_sink: Receives ``(task_id, error)`` for failing callbacks;
                failures are logged when omitted
        """
        self.clock: FrameClock = clock if clock is not None else LoopFrameClock()
        self._error_sink = error_sink or self._log_task_error
        self._tasks: dict[int, ScheduledTask] = {}
        self._task_ids = itertools.count(1)

    def __enter__(self) -> "TaskScheduler":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.cancel_all()

    @property
    def running_tasks(self) -> int:
        """Number of tasks that have neither completed nor been cancelled."""
        return len(self._tasks)

    def schedule_frame(self, callback: TaskCallback, on_error: FailureHook | None = None) -> int:
        """Run ``callback`` on the next display frame.

        Args:
            callback: Function to run
            on_error: Receives the failure if the clock never delivers the frame

        Returns:
            Task id usable with ``cancel``
        """
        task_id = next(self._task_ids)
        handle = self.clock.request_frame(
            lambda: self._execute(callback, task_id),
            lambda error: self._fail(task_id, error),
        )
        self._register(task_id, TaskKind.FRAME, lambda: self.clock.cancel_frame(handle), on_error)
        return task_id

    def schedule_delay(
        self,
        callback: TaskCallback,
        delay_ms: float = 0,
        on_error: FailureHook | None = None,
    ) -> int:
        """Run ``callback`` after ``delay_ms`` milliseconds.

        Returns:
            Task id usable with ``cancel``
        """
        task_id = next(self._task_ids)
        handle = self.clock.call_later(delay_ms, lambda: self._execute(callback, task_id))
        self._register(task_id, TaskKind.DELAY, lambda: self.clock.cancel_timer(handle), on_error)
        return task_id

    def schedule_frame_after_next(
        self, callback: TaskCallback, on_error: FailureHook | None = None
    ) -> int:
        """Run ``callback`` on the frame after the next one.

        The first frame only re-arms the task, so by the time ``callback`` runs
        a whole frame has been painted. The task keeps a single id across both
        frames and can be cancelled at any point.

        Returns:
            Task id usable with ``cancel``
        """
        task_id = next(self._task_ids)

        def fail(error: Exception) -> None:
            self._fail(task_id, error)

        def on_first_frame() -> None:
            task = self._tasks.get(task_id)
            if task is None:
                return
            try:
                handle = self.clock.request_frame(lambda: self._execute(callback, task_id), fail)
            except Exception as error:
                fail(error)
                return
            task.cancel = lambda: self.clock.cancel_frame(handle)

        first_handle = self.clock.request_frame(on_first_frame, fail)
        self._register(
            task_id,
            TaskKind.FRAME_AFTER_NEXT,
            lambda: self.clock.cancel_frame(first_handle),
            on_error,
        )
        return task_id

    def cancel(self, task_id: int) -> None:
        """Cancel a task; unknown, completed or cancelled ids are ignored."""
        task = self._tasks.pop(task_id, None)
        if task is not None:
            task.cancel()

    def cancel_all(self) -> None:
        """Cancel every outstanding task."""
        tasks = list(self._tasks.values())
        self._tasks.clear()
        for task in tasks:
            task.cancel()
        if tasks:
            logger.debug("scheduled_tasks_cancelled", count=len(tasks))

    def next_frame(self) -> "asyncio.Future[None]":
        """Future resolved on the next display frame."""
        return self._future_for(self.schedule_frame)

    def frame_after_next(self) -> "asyncio.Future[None]":
        """Future resolved once a full frame has elapsed."""
        return self._future_for(self.schedule_frame_after_next)

    def sleep(self, delay_ms: float) -> "asyncio.Future[None]":
        """Future resolved after ``delay_ms`` milliseconds."""
        return self._future_for(self.schedule_delay, delay_ms)

    def _future_for(self, schedule: Callable[..., int], *args: Any) -> "asyncio.Future[None]":
        future: asyncio.Future[None] = asyncio.get_running_loop().create_future()

        def resolve() -> None:
            if not future.done():
                future.set_result(None)

        def reject(error: Exception) -> None:
            if not future.done():
                future.set_exception(error)

        task_id = schedule(resolve, *args, on_error=reject)

        def on_done(done: "asyncio.Future[None]") -> None:
            if done.cancelled():
                self.cancel(task_id)

        future.add_done_callback(on_done)
        return future

    def _register(
        self,
        task_id: int,
        kind: TaskKind,
        cancel: Callable[[], None],
        on_error: FailureHook | None,
    ) -> None:
        self._tasks[task_id] = ScheduledTask(id=task_id, kind=kind, cancel=cancel, on_error=on_error)

    def _execute(self, callback: TaskCallback, task_id: int) -> None:
        # A clock may still deliver a callback whose cancellation raced it
        if task_id not in self._tasks:
            return
        try:
            callback()
        except Exception as error:
            self._error_sink(task_id, error)
        finally:
            self._tasks.pop(task_id, None)

    def _fail(self, task_id: int, error: Exception) -> None:
        """End a task whose frame the clock could not deliver."""
        task = self._tasks.pop(task_id, None)
        if task is None:
            return
        logger.debug("scheduled_frame_failed", task_id=task_id, kind=task.kind.value)
        if task.on_error is None:
            self._error_sink(task_id, error)
            return
        try:
            task.on_error(error)
        except Exception as hook_error:
            self._error_sink(task_id, hook_error)

    @staticmethod
    def _log_task_error(task_id: int, error: Exception) -> None:
        logger.error("scheduled_task_failed", task_id=task_id, error=str(error), exc_info=error)
