"""
Rendering Context

Responsibilities:
- Owns the browser session lifecycle (init / dispose)
- Navigates to each entry and waits for the page to settle
- Measures the content root and sizes the PDF page to it
- Exports PDFs and reports failures with entry-level detail

Owns: Browser session, page readiness, PDF sizing and export
Never: Decides which URLs to render or where manifests come from
"""

from pagefit.contexts.rendering.context import RendererContext
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
from pagefit.contexts.rendering.models import (
    ContextState,
    EntryResult,
    PageSize,
    RendererOptions,
    UrlEntry,
    pdf_page_size,
)

__all__ = [
    # Context and engines
    "RendererContext",
    "BrowserEngine",
    "PlaywrightEngine",
    # Data structures
    "ContextState",
    "EntryResult",
    "PageSize",
    "RendererOptions",
    "UrlEntry",
    "pdf_page_size",
    # Errors
    "RenderError",
    "UninitializedContext",
    "ContextDisposed",
    "AlreadyInitialized",
    "NavigationError",
    "NavigationTimeout",
    "TargetNotFound",
    "BoundingBoxUnavailable",
    "ExportFailure",
    "SessionCloseError",
]
