"""Timestamp formatting utilities."""

from datetime import datetime


def now() -> str:
    """Compact local timestamp for directory names, e.g. '20251114_123456'."""
    return datetime.now().strftime("%Y%m%d_%H%M%S")


def format_duration(seconds: float) -> str:
    """
    Format an elapsed time for log output.

    Examples:
        format_duration(0.4)    # "0.40s"
        format_duration(75.2)   # "1m 15s"
    """
    if seconds < 60:
        return f"{seconds:.2f}s"

    minutes, remainder = divmod(int(seconds), 60)
    return f"{minutes}m {remainder}s"
