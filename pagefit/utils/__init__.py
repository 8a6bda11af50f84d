"""
Shared utilities for PAGEFIT.

Common functionality used across contexts:
- Logger setup
- Timestamps
- PDF read-back
"""

from pagefit.utils.timestamp import format_duration, now

__all__ = ["format_duration", "now"]
