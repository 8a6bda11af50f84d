"""
Shared fixtures: an in-memory browser engine that mimics the Playwright
async surface used by RendererContext.

Each fake page looks its URL up in a dict of FakeDocument objects, so tests
describe a "site" as {url: FakeDocument(...)}.
"""

import asyncio
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

import pytest
from playwright.async_api import Error as PlaywrightError

from pagefit.contexts.rendering import BrowserEngine, RendererContext, RendererOptions


@dataclass
class FakeDocument:
    """A page as the fake browser sees it: selector -> bounding box (None = no box)."""

    boxes: Dict[str, Optional[dict]] = field(default_factory=dict)
    goto_error: Optional[Exception] = None
    idle_error: Optional[Exception] = None
    export_error: Optional[Exception] = None
    export_delay: float = 0.0
    query_error: Optional[Exception] = None
    measure_error: Optional[Exception] = None


def box(width: float, height: float) -> dict:
    return {"x": 0, "y": 0, "width": width, "height": height}


class FakeElement:
    def __init__(self, bounding: Optional[dict], error: Optional[Exception] = None):
        self._bounding = bounding
        self._error = error

    async def bounding_box(self) -> Optional[dict]:
        if self._error is not None:
            raise self._error
        return self._bounding


class FakePage:
    def __init__(self, browser: "FakeBrowser"):
        self.browser = browser
        self.document: Optional[FakeDocument] = None
        self.media: Optional[str] = None
        self.closed = False
        self.calls: List[tuple] = []

    async def emulate_media(self, media: Optional[str] = None) -> None:
        self.calls.append(("emulate_media", media))
        if self.browser.media_error is not None:
            raise self.browser.media_error
        self.media = media

    async def goto(self, url: str, wait_until: Optional[str] = None, timeout: Optional[float] = None):
        self.calls.append(("goto", url, wait_until, timeout))
        document = self.browser.documents.get(url)
        if document is None:
            raise PlaywrightError(f"net::ERR_NAME_NOT_RESOLVED at {url}")
        if document.goto_error is not None:
            raise document.goto_error
        self.document = document

    async def wait_for_load_state(self, state: str = "load", timeout: Optional[float] = None):
        self.calls.append(("wait_for_load_state", state, timeout))
        if self.document.idle_error is not None:
            raise self.document.idle_error

    async def query_selector(self, selector: str) -> Optional[FakeElement]:
        self.calls.append(("query_selector", selector))
        if self.document.query_error is not None:
            raise self.document.query_error
        if selector not in self.document.boxes:
            return None
        return FakeElement(self.document.boxes[selector], error=self.document.measure_error)

    async def pdf(self, path=None, width=None, height=None, margin=None, print_background=False):
        self.calls.append(("pdf", path))
        if self.document.export_delay:
            await asyncio.sleep(self.document.export_delay)
        if self.document.export_error is not None:
            raise self.document.export_error
        Path(path).write_bytes(b"%PDF-1.4\n%fake\n")
        self.browser.exports.append(
            {
                "path": Path(path),
                "width": width,
                "height": height,
                "margin": margin,
                "print_background": print_background,
                "media": self.media,
            }
        )

    async def close(self) -> None:
        self.closed = True


class FakeBrowser:
    def __init__(
        self,
        documents: Dict[str, FakeDocument],
        close_error: Optional[Exception] = None,
        page_error: Optional[Exception] = None,
        media_error: Optional[Exception] = None,
    ):
        self.documents = documents
        self.close_error = close_error
        self.page_error = page_error
        self.media_error = media_error
        self.pages: List[FakePage] = []
        self.exports: List[dict] = []
        self.closed = False

    async def new_page(self) -> FakePage:
        if self.page_error is not None:
            raise self.page_error
        page = FakePage(self)
        self.pages.append(page)
        return page

    async def close(self) -> None:
        if self.close_error is not None:
            raise self.close_error
        self.closed = True


class FakeEngine(BrowserEngine):
    def __init__(
        self,
        documents: Optional[Dict[str, FakeDocument]] = None,
        close_error: Optional[Exception] = None,
        launch_error: Optional[Exception] = None,
    ):
        self.documents = documents or {}
        self.close_error = close_error
        self.launch_error = launch_error
        self.launches: List[List[str]] = []
        self.browsers: List[FakeBrowser] = []
        self.shutdown_count = 0

    @property
    def browser(self) -> Optional[FakeBrowser]:
        return self.browsers[-1] if self.browsers else None

    async def launch(self, args) -> FakeBrowser:
        self.launches.append(list(args))
        if self.launch_error is not None:
            raise self.launch_error
        browser = FakeBrowser(self.documents, close_error=self.close_error)
        self.browsers.append(browser)
        return browser

    async def shutdown(self) -> None:
        self.shutdown_count += 1


@pytest.fixture
def fake_document():
    """The FakeDocument class, for building fake sites."""
    return FakeDocument


@pytest.fixture
def make_box():
    return box


@pytest.fixture
def fake_engine():
    """Factory: fake_engine(documents, close_error=None, launch_error=None) -> FakeEngine."""
    return FakeEngine


@pytest.fixture
def make_context(tmp_path):
    """
    Factory building a RendererContext over a FakeEngine.

    Returns (context, engine). Options default to output_dir=tmp_path/"out".
    """

    def _make(documents=None, engine=None, **option_overrides):
        engine = engine or FakeEngine(documents)
        option_overrides.setdefault("output_dir", tmp_path / "out")
        options = RendererOptions(**option_overrides)
        return RendererContext(options, engine=engine), engine

    return _make
