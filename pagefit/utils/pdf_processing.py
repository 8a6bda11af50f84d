"""
PDF read-back helpers for rendered output.

Helper functions:
    page_count: Quick page count, or None if unreadable.
    page_size_points: Media box size of a page in PDF points.
    points_to_px: Convert PDF points to CSS pixels.
"""

from pathlib import Path
from typing import Optional, Tuple

from PyPDF2 import PdfReader

# CSS pixels are 1/96 inch, PDF points 1/72 inch
PX_PER_POINT = 96 / 72


def page_count(pdf_path: Path) -> Optional[int]:
    """Get page count from PDF, or None if unreadable."""
    try:
        reader = PdfReader(str(pdf_path))
        return len(reader.pages)
    except Exception:
        return None


def page_size_points(pdf_path: Path, page: int = 1) -> Tuple[float, float]:
    """
    Return (width, height) of a page's media box in PDF points.

    Args:
        pdf_path: Path to PDF file
        page: Page number (1-indexed)

    Raises:
        FileNotFoundError: If the PDF does not exist
        IndexError: If the page does not exist
    """
    pdf_path = Path(pdf_path)
    if not pdf_path.exists():
        raise FileNotFoundError(f"PDF not found: {pdf_path}")

    reader = PdfReader(str(pdf_path))
    box = reader.pages[page - 1].mediabox
    return float(box.width), float(box.height)


def points_to_px(points: float) -> float:
    return points * PX_PER_POINT
