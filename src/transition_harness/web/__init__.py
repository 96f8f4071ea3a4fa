"""
Browser bindings using Playwright.

This module lets the analyser observe transitions rendered in a real page.
"""

from transition_harness.web.playwright_component import (
    PageFrameClock,
    PlaywrightTransitionComponent,
    PlaywrightTransitionContainer,
    create_page_analyser,
)

__all__ = [
    "PageFrameClock",
    "PlaywrightTransitionComponent",
    "PlaywrightTransitionContainer",
    "create_page_analyser",
]
