"""
Browser engine abstraction.

RendererContext talks to the browser through a BrowserEngine. The engine
launches a session; sessions and their pages expose the subset of the
Playwright async API the context uses:

    session.new_page() -> page
    session.close()
    page.emulate_media(media=...)
    page.goto(url, wait_until=..., timeout=...)
    page.wait_for_load_state(state, timeout=...)
    page.query_selector(selector) -> element | None
    element.bounding_box() -> {"x", "y", "width", "height"} | None
    page.pdf(path=..., width=..., height=..., margin=..., print_background=...)
    page.close()

Test doubles implement the same surface in memory.
"""

from abc import ABC, abstractmethod
from typing import Any, Optional, Sequence

from playwright.async_api import Browser, Playwright, async_playwright

from pagefit.contexts.rendering.logger import _log_debug, _log_info


class BrowserEngine(ABC):
    """Launches browser sessions and releases whatever backs them."""

    @abstractmethod
    async def launch(self, args: Sequence[str]) -> Any:
        """Launch a browser session with engine-specific flags."""

    @abstractmethod
    async def shutdown(self) -> None:
        """Release engine-level resources. Must be safe to call repeatedly."""


class PlaywrightEngine(BrowserEngine):
    """
    Chromium driven through Playwright.

    The Playwright driver is started on first launch and stopped on shutdown.
    """

    def __init__(self, headless: bool = True, browser_type: str = "chromium"):
        self.headless = headless
        self.browser_type = browser_type
        self._playwright: Optional[Playwright] = None

    async def launch(self, args: Sequence[str]) -> Browser:
        if self._playwright is None:
            self._playwright = await async_playwright().start()

        launcher = getattr(self._playwright, self.browser_type)
        browser = await launcher.launch(headless=self.headless, args=list(args))

        _log_info(f"Launched {self.browser_type} {browser.version}")
        if args:
            _log_debug(f"  Launch args: {' '.join(args)}")
        return browser

    async def shutdown(self) -> None:
        if self._playwright is not None:
            await self._playwright.stop()
            self._playwright = None
            _log_debug("Playwright driver stopped")
