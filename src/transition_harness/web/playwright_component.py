"""
Playwright bindings for transition analysis in a real browser.

Provides the browser-side collaborators of the analyser:

- ``PageFrameClock`` drives scheduler frames from the page's own
  ``requestAnimationFrame``.
- ``PlaywrightTransitionContainer`` reads the container markup, finds
  elements with a running transition and awaits their ``transitionend``.
- ``PlaywrightTransitionComponent`` resolves test ids up front so the
  analyser can fail fast when the container is missing.

Usage::

    analyser = await create_page_analyser(page)
    analyser.add_transition_trigger(
        TransitionTrigger(lambda component: component.click("toggle"), 75)
    )
    report = await analyser.analyse_transition_activity()
"""

import asyncio
from collections.abc import Callable
from typing import Any

from playwright.async_api import ElementHandle, Locator, Page

from ..analysis import TransitionActivityAnalyser
from ..config import HarnessSettings, get_settings
from ..logging import get_logger
from ..scheduling import TaskScheduler

logger = get_logger(__name__)

REQUEST_FRAME_SCRIPT = "() => new Promise(resolve => requestAnimationFrame(resolve))"

TRANSITION_DURATION_SCRIPT = """
element => parseFloat(getComputedStyle(element).transitionDuration) || 0
"""

WAIT_FOR_TRANSITION_END_SCRIPT = """
element => new Promise(resolve => {
    const handler = event => {
        if (event.target === element) {
            element.removeEventListener("transitionend", handler);
            resolve();
        }
    };
    element.addEventListener("transitionend", handler);
})
"""


class PageFrameClock:
    """Frame clock whose frames are the browser's animation frames."""

    def __init__(self, page: Page) -> None:
        self.page = page

    def request_frame(
        self,
        callback: Callable[[], None],
        on_error: Callable[[Exception], None] | None = None,
    ) -> "asyncio.Task[Any]":
        frame = asyncio.ensure_future(self.page.evaluate(REQUEST_FRAME_SCRIPT))
        frame.add_done_callback(lambda done: self._on_frame(done, callback, on_error))
        return frame

    @staticmethod
    def _on_frame(
        frame: "asyncio.Future[Any]",
        callback: Callable[[], None],
        on_error: Callable[[Exception], None] | None,
    ) -> None:
        if frame.cancelled():
            return
        error = frame.exception()
        if error is None:
            callback()
            return
        logger.error("animation_frame_request_failed", error=str(error))
        if on_error is not None and isinstance(error, Exception):
            on_error(error)

    def cancel_frame(self, handle: "asyncio.Task[Any]") -> None:
        handle.cancel()

    def call_later(self, delay_ms: float, callback: Callable[[], None]) -> asyncio.TimerHandle:
        return asyncio.get_running_loop().call_later(max(delay_ms, 0) / 1000, callback)

    def cancel_timer(self, handle: asyncio.TimerHandle) -> None:
        handle.cancel()

    def now_ms(self) -> float:
        return asyncio.get_running_loop().time() * 1000


class PlaywrightTransitionContainer:
    """Transition container located in a Playwright page."""

    def __init__(self, locator: Locator) -> None:
        self.locator = locator

    async def inner_html(self) -> str:
        return await self.locator.inner_html()

    async def transitioning_elements(self, duration_marker: str) -> list[ElementHandle]:
        """Elements carrying the duration marker with a non-zero computed duration."""
        candidates = await self.locator.locator(f'[class*="{duration_marker}"]').element_handles()
        transitioning = []
        for candidate in candidates:
            duration = await candidate.evaluate(TRANSITION_DURATION_SCRIPT)
            if duration:
                transitioning.append(candidate)
            else:
                await candidate.dispose()
        logger.debug(
            "transitioning_elements_found",
            candidates=len(candidates),
            transitioning=len(transitioning),
        )
        return transitioning

    async def wait_for_transition_end(self, element: ElementHandle) -> None:
        """Wait for ``element``'s own ``transitionend``, then release the handle."""
        try:
            await element.evaluate(WAIT_FOR_TRANSITION_END_SCRIPT)
        finally:
            await element.dispose()


class PlaywrightTransitionComponent:
    """A rendered page exposing elements by test id.

    Use ``attach`` to create one; it resolves the requested test ids so
    ``get_by_test_id`` can answer synchronously.
    """

    def __init__(
        self,
        page: Page,
        containers: dict[str, PlaywrightTransitionContainer],
        test_id_attribute: str = "data-testid",
    ) -> None:
        self.page = page
        self._containers = containers
        self.test_id_attribute = test_id_attribute

    @classmethod
    async def attach(
        cls,
        page: Page,
        settings: HarnessSettings | None = None,
        test_ids: tuple[str, ...] | None = None,
    ) -> "PlaywrightTransitionComponent":
        """
        Resolve test ids in ``page``.

        Args:
            page: Page with the component rendered
            settings: Harness settings (defaults to the global settings)
            test_ids: Test ids to resolve (defaults to the container test id)

        Returns:
            Component whose ``get_by_test_id`` finds every id present exactly once
        """
        settings = settings or get_settings()
        attribute = settings.test_id_attribute
        containers = {}
        for test_id in test_ids or (settings.container_test_id,):
            locator = page.locator(f'[{attribute}="{test_id}"]')
            count = await locator.count()
            if count == 1:
                containers[test_id] = PlaywrightTransitionContainer(locator)
            else:
                logger.warning("test_id_not_unique", test_id=test_id, count=count)
        return cls(page, containers, test_id_attribute=attribute)

    def get_by_test_id(self, test_id: str) -> PlaywrightTransitionContainer | None:
        return self._containers.get(test_id)

    async def click(self, test_id: str) -> None:
        """Click the element with ``test_id``."""
        await self.page.locator(f'[{self.test_id_attribute}="{test_id}"]').click()


async def create_page_analyser(
    page: Page,
    settings: HarnessSettings | None = None,
) -> TransitionActivityAnalyser:
    """Build an analyser whose frames follow the page's animation frames."""
    settings = settings or get_settings()
    component = await PlaywrightTransitionComponent.attach(page, settings)
    scheduler = TaskScheduler(clock=PageFrameClock(page))
    return TransitionActivityAnalyser(component, scheduler=scheduler, settings=settings)
