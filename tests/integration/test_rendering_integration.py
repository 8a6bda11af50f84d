"""
Integration tests for rendering context - renders local pages with real Chromium.
"""

import asyncio
from pathlib import Path

import pytest

from pagefit.contexts.rendering import (
    RendererContext,
    RendererOptions,
    TargetNotFound,
    UrlEntry,
)
from pagefit.utils.pdf_processing import page_count, page_size_points, points_to_px


def _chromium_available() -> bool:
    try:
        from playwright.sync_api import sync_playwright

        with sync_playwright() as playwright:
            return Path(playwright.chromium.executable_path).exists()
    except Exception:
        return False


CHROMIUM_AVAILABLE = _chromium_available()
skip_if_no_chromium = pytest.mark.skipif(
    not CHROMIUM_AVAILABLE,
    reason="Chromium not installed - run `playwright install chromium`",
)

PAGE_TEMPLATE = """<!DOCTYPE html>
<html>
<head>
<style>
  body {{ margin: 0; }}
  @media print {{ #content {{ background: red; }} }}
</style>
</head>
<body>
  {content}
</body>
</html>
"""


def _write_page(directory: Path, name: str, content: str) -> str:
    path = directory / name
    path.write_text(PAGE_TEMPLATE.format(content=content))
    return path.as_uri()


def _content_div(width: int, height: int) -> str:
    return f'<div id="content" style="width:{width}px;height:{height}px;background:#ddeeff">Hi</div>'


async def _render(options, entries):
    async with RendererContext(options) as context:
        return await context.render_url(entries)


@pytest.mark.integration
@pytest.mark.browser
@skip_if_no_chromium
def test_render_sizes_pdf_to_content(tmp_path):
    """Test the two-page scenario end to end: 800x600 -> 820x620, 400x300 -> 420x320."""
    site = tmp_path / "site"
    site.mkdir()
    url_a = _write_page(site, "a.html", _content_div(800, 600))
    url_b = _write_page(site, "b.html", _content_div(400, 300))

    out_dir = tmp_path / "out"
    options = RendererOptions(output_dir=out_dir, target_class="#content", idle_timeout_ms=10000)

    outputs = asyncio.run(_render(options, [UrlEntry(url_a, "a.pdf"), UrlEntry(url_b, "b.pdf")]))

    assert outputs == ["a.pdf", "b.pdf"]
    for name, (width, height) in {"a.pdf": (820, 620), "b.pdf": (420, 320)}.items():
        pdf_path = out_dir / name
        assert pdf_path.exists()
        assert page_count(pdf_path) >= 1

        width_pt, height_pt = page_size_points(pdf_path)
        assert points_to_px(width_pt) == pytest.approx(width, abs=2)
        assert points_to_px(height_pt) == pytest.approx(height, abs=2)


@pytest.mark.integration
@pytest.mark.browser
@skip_if_no_chromium
def test_render_missing_target_keeps_earlier_outputs(tmp_path):
    """Test the second page lacking #content aborts after a.pdf is written."""
    site = tmp_path / "site"
    site.mkdir()
    url_a = _write_page(site, "a.html", _content_div(800, 600))
    url_b = _write_page(site, "b.html", "<p>No content root here</p>")

    out_dir = tmp_path / "out"
    options = RendererOptions(output_dir=out_dir, target_class="#content", idle_timeout_ms=10000)

    with pytest.raises(TargetNotFound) as exc_info:
        asyncio.run(_render(options, [UrlEntry(url_a, "a.pdf"), UrlEntry(url_b, "b.pdf")]))

    assert exc_info.value.selector == "#content"
    assert exc_info.value.index == 2
    assert (out_dir / "a.pdf").exists()
    assert not (out_dir / "b.pdf").exists()


@pytest.mark.integration
@pytest.mark.browser
@skip_if_no_chromium
def test_render_results_mode_reads_back_page_count(tmp_path):
    site = tmp_path / "site"
    site.mkdir()
    url = _write_page(site, "a.html", _content_div(300, 200))

    async def scenario():
        options = RendererOptions(output_dir=tmp_path / "out", target_class="#content")
        async with RendererContext(options) as context:
            return await context.render_url_results([UrlEntry(url, "a.pdf")])

    results = asyncio.run(scenario())

    assert results[0].success, results[0].error
    assert results[0].page_count is not None
    assert results[0].page_count >= 1
