"""
Renderer Context

Owns a single browser session and renders batches of URL entries to PDF files
sized to their content.

Usage contract: only one initialized RendererContext should be live at a time.
Either initialize one at startup and keep it for the program's lifetime, or
initialize, use and dispose one per batch. Nothing enforces this.

Example:
    options = RendererOptions(output_dir=Path("/tmp/out"), target_class="#content")

    async with RendererContext(options) as context:
        outputs = await context.render_url([
            UrlEntry("https://example.com/a", "a.pdf"),
            UrlEntry("https://example.com/b", "b.pdf"),
        ])
"""

import asyncio
import time
from pathlib import Path
from typing import Any, Iterable, List, Optional, Sequence

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from pagefit.contexts.rendering.engine import BrowserEngine, PlaywrightEngine
from pagefit.contexts.rendering.exceptions import (
    AlreadyInitialized,
    BoundingBoxUnavailable,
    ContextDisposed,
    ExportFailure,
    NavigationError,
    NavigationTimeout,
    RenderError,
    SessionCloseError,
    TargetNotFound,
    UninitializedContext,
)
from pagefit.contexts.rendering.logger import (
    _log_info,
    _log_warning,
    log_batch_result,
    log_batch_start,
    log_entry_result,
    log_entry_start,
)
from pagefit.contexts.rendering.models import (
    ContextState,
    EntryResult,
    PageSize,
    RendererOptions,
    UrlEntry,
    pdf_margins,
    pdf_page_size,
)
from pagefit.utils.pdf_processing import page_count


class RendererContext:
    """
    Wrapper around one browser session.

    Lifecycle: UNINITIALIZED -> READY (init) -> DISPOSED (dispose).
    A disposed context cannot be initialized again.

    Args:
        options: Rendering configuration (defaults: output_dir "./", target_class "body")
        engine: Browser engine to launch sessions with (default: Playwright Chromium)
    """

    def __init__(
        self,
        options: Optional[RendererOptions] = None,
        engine: Optional[BrowserEngine] = None,
    ):
        self.options = options or RendererOptions()
        self.engine = engine or PlaywrightEngine(headless=self.options.headless)
        self._state = ContextState.UNINITIALIZED
        self._browser: Any = None

    def __repr__(self) -> str:
        return (
            f"RendererContext(state={self._state.value}, "
            f"output_dir={str(self.options.output_dir)!r}, "
            f"target_class={self.options.target_class!r})"
        )

    @property
    def state(self) -> ContextState:
        return self._state

    @property
    def is_ready(self) -> bool:
        return self._state is ContextState.READY

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    async def init(self, args: Optional[Sequence[str]] = None) -> None:
        """
        Launch the browser session. Should be disposed with dispose().

        Args:
            args: Browser launch flags (default: options.launch_args)

        Raises:
            AlreadyInitialized: If a session is already live
            ContextDisposed: If the context was disposed
        """
        if self._state is ContextState.READY:
            raise AlreadyInitialized()
        if self._state is ContextState.DISPOSED:
            raise ContextDisposed()

        launch_args = list(args) if args is not None else list(self.options.launch_args)
        try:
            browser = await self.engine.launch(launch_args)
        except Exception:
            await self.engine.shutdown()
            raise

        self._browser = browser
        self._state = ContextState.READY
        _log_info("Renderer context initialized")

    async def dispose(self) -> None:
        """
        Close the browser session.

        No-op if the context was never initialized or is already disposed.

        Raises:
            SessionCloseError: If the browser session fails to close. The context
                is disposed and the engine shut down regardless.
        """
        if self._state is not ContextState.READY:
            return

        browser, self._browser = self._browser, None
        self._state = ContextState.DISPOSED
        try:
            await browser.close()
        except PlaywrightError as e:
            raise SessionCloseError(e) from e
        finally:
            await self.engine.shutdown()

        _log_info("Renderer context disposed")

    async def dispose_after_failure(self) -> None:
        """
        Dispose while another exception is propagating.

        A SessionCloseError is logged as a warning instead of raised, so the
        caller's original error is the one that surfaces.
        """
        try:
            await self.dispose()
        except SessionCloseError as e:
            _log_warning(f"{e} (while handling an earlier failure)")

    async def __aenter__(self) -> "RendererContext":
        await self.init()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if exc_type is None:
            await self.dispose()
        else:
            await self.dispose_after_failure()

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------
    async def render_url(self, entries: Iterable[UrlEntry]) -> List[str]:
        """
        Render every entry to its output, strictly in order.

        The first failure aborts the batch. PDFs written by earlier entries
        are left on disk.

        Args:
            entries: Ordered entries to render

        Returns:
            Output names of the rendered entries, in input order

        Raises:
            UninitializedContext: If init() has not been called (nothing is rendered)
            ContextDisposed: If the context was disposed
            RenderError: Subclass describing the first entry that failed
        """
        browser = self._require_session()
        entries = list(entries)
        log_batch_start(entries, self.options)

        start_time = time.time()
        results: List[EntryResult] = []
        for index, entry in enumerate(entries, start=1):
            log_entry_start(entry, index, len(entries))
            try:
                result = await self._render_entry(browser, entry, index)
            except RenderError as e:
                results.append(EntryResult(entry=entry, index=index, success=False, error=e))
                log_entry_result(results[-1], len(entries))
                log_batch_result(results, time.time() - start_time)
                raise
            results.append(result)
            log_entry_result(result, len(entries))

        log_batch_result(results, time.time() - start_time)
        return [result.entry.output for result in results]

    async def render_url_results(self, entries: Iterable[UrlEntry]) -> List[EntryResult]:
        """
        Render every entry in order, collecting a result per entry.

        Unlike render_url(), a failing entry does not stop the batch: its
        RenderError is recorded on its EntryResult and the next entry is rendered.

        Returns:
            One EntryResult per entry, in input order

        Raises:
            UninitializedContext: If init() has not been called
            ContextDisposed: If the context was disposed
        """
        browser = self._require_session()
        entries = list(entries)
        log_batch_start(entries, self.options)

        start_time = time.time()
        results: List[EntryResult] = []
        for index, entry in enumerate(entries, start=1):
            log_entry_start(entry, index, len(entries))
            entry_start = time.time()
            try:
                result = await self._render_entry(browser, entry, index)
                result.page_count = page_count(result.output_path)
            except RenderError as e:
                result = EntryResult(
                    entry=entry,
                    index=index,
                    success=False,
                    error=e,
                    elapsed_s=time.time() - entry_start,
                )
            results.append(result)
            log_entry_result(result, len(entries))

        log_batch_result(results, time.time() - start_time)
        return results

    def _require_session(self) -> Any:
        if self._state is ContextState.DISPOSED:
            raise ContextDisposed()
        if self._state is not ContextState.READY:
            raise UninitializedContext()
        return self._browser

    async def _render_entry(self, browser: Any, entry: UrlEntry, index: int) -> EntryResult:
        """Render one entry in a fresh page, closing the page on every path."""
        start_time = time.time()
        output_path = self.options.output_path(entry)

        page = await self._open_page(browser, entry, index)
        try:
            await self._navigate(page, entry, index)
            page_size = await self._measure(page, entry, index)
            await self._export(page, output_path, page_size, entry, index)
        finally:
            await self._close_page(page, entry)

        return EntryResult(
            entry=entry,
            index=index,
            success=True,
            output_path=output_path,
            page_size=page_size,
            elapsed_s=time.time() - start_time,
        )

    async def _open_page(self, browser: Any, entry: UrlEntry, index: int) -> Any:
        try:
            page = await browser.new_page()
        except PlaywrightError as e:
            raise NavigationError("Failed to open page", entry, index, e) from e

        try:
            # Screen rules, not print rules: the PDF should look like the page
            await page.emulate_media(media="screen")
        except PlaywrightError as e:
            await self._close_page(page, entry)
            raise NavigationError("Failed to emulate screen media", entry, index, e) from e

        return page

    async def _navigate(self, page: Any, entry: UrlEntry, index: int) -> None:
        navigation_timeout = self.options.navigation_timeout_ms
        try:
            await page.goto(entry.url, wait_until="domcontentloaded", timeout=navigation_timeout)
        except PlaywrightTimeoutError as e:
            raise NavigationTimeout("navigation", navigation_timeout, entry, index, e) from e
        except PlaywrightError as e:
            raise NavigationError("Navigation failed", entry, index, e) from e

        # Client-side redirects and async loads count as part of the page being ready
        idle_timeout = self.options.idle_timeout_ms
        try:
            await page.wait_for_load_state("networkidle", timeout=idle_timeout)
        except PlaywrightTimeoutError as e:
            raise NavigationTimeout("network idle", idle_timeout, entry, index, e) from e
        except PlaywrightError as e:
            raise NavigationError("Waiting for network idle failed", entry, index, e) from e

    async def _measure(self, page: Any, entry: UrlEntry, index: int) -> PageSize:
        selector = self.options.target_class
        try:
            element = await page.query_selector(selector)
        except PlaywrightError as e:
            raise TargetNotFound(selector, entry=entry, index=index, original_error=e) from e
        if element is None:
            raise TargetNotFound(selector, entry=entry, index=index)

        try:
            box = await element.bounding_box()
        except PlaywrightError as e:
            raise BoundingBoxUnavailable(selector, entry=entry, index=index, original_error=e) from e
        if not box or box["width"] <= 0 or box["height"] <= 0:
            raise BoundingBoxUnavailable(selector, entry=entry, index=index, box=box)

        return pdf_page_size(box, padding=self.options.padding_px)

    async def _export(
        self, page: Any, output_path: Path, page_size: PageSize, entry: UrlEntry, index: int
    ) -> None:
        export_timeout = self.options.export_timeout_ms
        try:
            output_path.parent.mkdir(parents=True, exist_ok=True)
            export = page.pdf(
                path=str(output_path),
                margin=pdf_margins(self.options.margin_px),
                print_background=True,
                **page_size.as_pdf_kwargs(),
            )
            if export_timeout:
                await asyncio.wait_for(export, timeout=export_timeout / 1000)
            else:
                await export
        except asyncio.TimeoutError as e:
            cause = TimeoutError(f"export exceeded {export_timeout}ms")
            raise ExportFailure(output_path, cause, entry=entry, index=index) from e
        except (PlaywrightError, OSError) as e:
            raise ExportFailure(output_path, e, entry=entry, index=index) from e

    async def _close_page(self, page: Any, entry: UrlEntry) -> None:
        try:
            await page.close()
        except PlaywrightError as e:
            _log_warning(f"Failed to close page for {entry.url}: {e}")
