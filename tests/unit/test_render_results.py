"""Unit tests for per-entry result mode (render_url_results)."""

import asyncio

import pytest
from playwright.async_api import Error as PlaywrightError

from pagefit.contexts.rendering import (
    PageSize,
    TargetNotFound,
    UninitializedContext,
    UrlEntry,
)

ENTRIES = [
    UrlEntry("https://example.com/a", "a.pdf"),
    UrlEntry("https://example.com/b", "b.pdf"),
    UrlEntry("https://example.com/c", "c.pdf"),
]


@pytest.fixture
def site_missing_second(fake_document, make_box):
    return {
        ENTRIES[0].url: fake_document(boxes={"main": make_box(640, 480)}),
        ENTRIES[1].url: fake_document(boxes={}),
        ENTRIES[2].url: fake_document(boxes={"main": make_box(320, 240)}),
    }


async def _results(context, entries):
    async with context:
        return await context.render_url_results(entries)


@pytest.mark.unit
def test_results_continue_past_failure(make_context, site_missing_second, tmp_path):
    """Test that a failing entry is recorded and later entries still render."""
    context, _ = make_context(site_missing_second, target_class="main")

    results = asyncio.run(_results(context, ENTRIES))

    assert [r.success for r in results] == [True, False, True]
    assert [r.index for r in results] == [1, 2, 3]
    assert [r.entry for r in results] == ENTRIES
    assert (tmp_path / "out" / "a.pdf").exists()
    assert not (tmp_path / "out" / "b.pdf").exists()
    assert (tmp_path / "out" / "c.pdf").exists()


@pytest.mark.unit
def test_results_carry_error_and_sizes(make_context, site_missing_second, tmp_path):
    """Test failed results hold the error and successful ones the page size and path."""
    context, _ = make_context(site_missing_second, target_class="main")

    results = asyncio.run(_results(context, ENTRIES))

    failed = results[1]
    assert isinstance(failed.error, TargetNotFound)
    assert failed.output_path is None
    assert failed.page_size is None

    assert results[0].page_size == PageSize(width=660, height=500)
    assert results[2].page_size == PageSize(width=340, height=260)
    assert results[0].output_path == tmp_path / "out" / "a.pdf"
    assert results[0].error is None


@pytest.mark.unit
def test_results_read_back_page_count(make_context, site_missing_second):
    """Test that page_count is None when the written file is not a readable PDF."""
    context, _ = make_context(site_missing_second, target_class="main")

    results = asyncio.run(_results(context, ENTRIES[:1]))

    # The fake engine writes a stub, not a real PDF
    assert results[0].success
    assert results[0].page_count is None


@pytest.mark.unit
def test_results_require_init(make_context, site_missing_second):
    context, _ = make_context(site_missing_second)

    with pytest.raises(UninitializedContext):
        asyncio.run(context.render_url_results(ENTRIES))


@pytest.mark.unit
def test_results_continue_past_browser_error(make_context, fake_document, make_box, tmp_path):
    """Test a browser error while querying one page is recorded and the batch continues."""
    closed = PlaywrightError("Target page, context or browser has been closed")
    site = {
        ENTRIES[0].url: fake_document(boxes={"main": make_box(640, 480)}, query_error=closed),
        ENTRIES[1].url: fake_document(boxes={"main": make_box(320, 240)}),
    }
    context, _ = make_context(site, target_class="main")

    results = asyncio.run(_results(context, ENTRIES[:2]))

    assert [r.success for r in results] == [False, True]
    assert isinstance(results[0].error, TargetNotFound)
    assert results[0].error.original_error is closed
    assert results[0].error.index == 1
    assert (tmp_path / "out" / "b.pdf").exists()
