"""
Rendering data structures.

Immutable inputs (UrlEntry, RendererOptions), the context lifecycle state,
and the sizing rule that maps a measured content box to a PDF page.
"""

import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Mapping, Optional, Tuple

from dotenv import load_dotenv

load_dotenv()

DEFAULT_OUTPUT_DIR = os.getenv("PAGEFIT_OUTPUT_DIR", "./")
DEFAULT_TARGET_SELECTOR = os.getenv("PAGEFIT_TARGET_SELECTOR", "body")
DEFAULT_NAVIGATION_TIMEOUT_MS = int(os.getenv("PAGEFIT_NAVIGATION_TIMEOUT_MS", "30000"))
DEFAULT_IDLE_TIMEOUT_MS = int(os.getenv("PAGEFIT_IDLE_TIMEOUT_MS", "30000"))
DEFAULT_EXPORT_TIMEOUT_MS = int(os.getenv("PAGEFIT_EXPORT_TIMEOUT_MS", "60000"))
DEFAULT_HEADLESS = os.getenv("PAGEFIT_HEADLESS", "true").lower() != "false"

# Added to the measured width and height so content does not clip at the edge
CONTENT_PADDING_PX = 20
# Margin applied by the PDF export on every side
PDF_MARGIN_PX = 10


@dataclass(frozen=True)
class UrlEntry:
    """
    One page to render.

    Attributes:
        url: Source URL (passed to the browser as-is)
        output: Output file name, relative to RendererOptions.output_dir
    """

    url: str
    output: str


@dataclass(frozen=True)
class RendererOptions:
    """
    Configuration for a RendererContext, fixed at construction.

    Attributes:
        output_dir: Base directory for every output file
        target_class: CSS selector of the content root that sizes the PDF page
        navigation_timeout_ms: Deadline for reaching DOMContentLoaded
        idle_timeout_ms: Deadline for the network-idle wait (0 = no deadline)
        export_timeout_ms: Deadline for the PDF export (0 = no deadline)
        launch_args: Browser flags used when init() is called without args
        headless: Launch the browser without a window
        padding_px: Added to measured width and height
        margin_px: PDF margin on every side
    """

    output_dir: Path = Path(DEFAULT_OUTPUT_DIR)
    target_class: str = DEFAULT_TARGET_SELECTOR
    navigation_timeout_ms: int = DEFAULT_NAVIGATION_TIMEOUT_MS
    idle_timeout_ms: int = DEFAULT_IDLE_TIMEOUT_MS
    export_timeout_ms: int = DEFAULT_EXPORT_TIMEOUT_MS
    launch_args: Tuple[str, ...] = ()
    headless: bool = DEFAULT_HEADLESS
    padding_px: float = CONTENT_PADDING_PX
    margin_px: float = PDF_MARGIN_PX

    def __post_init__(self) -> None:
        if not isinstance(self.output_dir, Path):
            object.__setattr__(self, "output_dir", Path(self.output_dir))
        if not isinstance(self.launch_args, tuple):
            object.__setattr__(self, "launch_args", tuple(self.launch_args))
        if not isinstance(self.target_class, str) or not self.target_class.strip():
            raise ValueError("target_class must be a non-empty selector")
        for name in ("navigation_timeout_ms", "idle_timeout_ms", "export_timeout_ms"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be >= 0")

    @classmethod
    def from_env(cls, **overrides) -> "RendererOptions":
        """
        Build options from PAGEFIT_* environment variables.

        Keyword overrides win over the environment; None values are ignored
        so CLI options can be passed straight through.
        """
        values = {
            "output_dir": Path(os.getenv("PAGEFIT_OUTPUT_DIR", DEFAULT_OUTPUT_DIR)),
            "target_class": os.getenv("PAGEFIT_TARGET_SELECTOR", DEFAULT_TARGET_SELECTOR),
            "navigation_timeout_ms": int(
                os.getenv("PAGEFIT_NAVIGATION_TIMEOUT_MS", DEFAULT_NAVIGATION_TIMEOUT_MS)
            ),
            "idle_timeout_ms": int(os.getenv("PAGEFIT_IDLE_TIMEOUT_MS", DEFAULT_IDLE_TIMEOUT_MS)),
            "export_timeout_ms": int(
                os.getenv("PAGEFIT_EXPORT_TIMEOUT_MS", DEFAULT_EXPORT_TIMEOUT_MS)
            ),
            "headless": os.getenv("PAGEFIT_HEADLESS", str(DEFAULT_HEADLESS)).lower() != "false",
        }
        values.update({key: value for key, value in overrides.items() if value is not None})
        return cls(**values)

    def output_path(self, entry: UrlEntry) -> Path:
        return self.output_dir / entry.output


class ContextState(Enum):
    """Lifecycle of a RendererContext. Only READY holds a browser session."""

    UNINITIALIZED = "uninitialized"
    READY = "ready"
    DISPOSED = "disposed"


@dataclass(frozen=True)
class PageSize:
    """PDF page dimensions in CSS pixels."""

    width: float
    height: float

    def as_pdf_kwargs(self) -> dict:
        """Width/height in the unit-suffixed form the PDF export expects."""
        return {"width": f"{_format_px(self.width)}px", "height": f"{_format_px(self.height)}px"}


def _format_px(value: float) -> str:
    # 820.0 -> "820", 820.5 -> "820.5"
    return str(int(value)) if float(value).is_integer() else str(value)


def pdf_page_size(box: Mapping[str, float], padding: float = CONTENT_PADDING_PX) -> PageSize:
    """
    Size a PDF page from a measured bounding box.

    Independent of the viewport: width = box width + padding,
    height = box height + padding.

    Example:
        >>> pdf_page_size({"x": 0, "y": 0, "width": 800, "height": 600})
        PageSize(width=820, height=620)
    """
    return PageSize(width=box["width"] + padding, height=box["height"] + padding)


def pdf_margins(margin: float = PDF_MARGIN_PX) -> dict:
    value = f"{_format_px(margin)}px"
    return {"top": value, "left": value, "bottom": value, "right": value}


@dataclass
class EntryResult:
    """
    Outcome of rendering a single entry in per-entry mode.

    Attributes:
        entry: The entry that was rendered
        index: 1-based position in the batch
        success: Whether the PDF was written
        output_path: Path of the written PDF (None if failed)
        page_size: PDF page size used for export (None if not measured)
        page_count: Pages in the written PDF (None if unavailable)
        error: The render error that stopped this entry (None on success)
        elapsed_s: Wall time spent on this entry
    """

    entry: UrlEntry
    index: int
    success: bool
    output_path: Optional[Path] = None
    page_size: Optional[PageSize] = None
    page_count: Optional[int] = None
    error: Optional[Exception] = None
    elapsed_s: float = 0.0
