"""
Rendering context logger.

Provides logging interface for rendering context with automatic [render] prefix.
All rendering modules should import from this module, not from utils.logger directly.
"""

from pathlib import Path
from typing import Sequence

from loguru import logger

from pagefit.contexts.rendering.models import EntryResult, RendererOptions, UrlEntry
from pagefit.utils.logger import setup_logger as _setup_logger
from pagefit.utils.timestamp import format_duration

CONTEXT_PREFIX = "[render]"


def setup_rendering_logger(
    log_dir: Path, options: RendererOptions, console_level: str = "INFO"
) -> Path:
    """
    Setup logger for rendering context.

    Configures loguru with provenance tracking and rendering-specific context.

    Args:
        log_dir: Directory for this rendering session
        options: Options the session renders with (recorded in the provenance header)
        console_level: Minimum level echoed to the console

    Returns:
        Path to log file
    """
    return _setup_logger(
        context_name="render",
        log_dir=log_dir,
        extra_provenance={
            "Output directory": options.output_dir,
            "Target selector": options.target_class,
            "Idle timeout (ms)": options.idle_timeout_ms or "unbounded",
        },
        console_level=console_level,
    )


# Wrapper functions with automatic [render] prefix


def _log_info(message: str) -> None:
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_success(message: str) -> None:
    logger.success(f"{CONTEXT_PREFIX} {message}")


def _log_error(message: str) -> None:
    logger.error(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    logger.debug(f"{CONTEXT_PREFIX} {message}")


# High-level rendering-specific logging helpers


def log_batch_start(entries: Sequence[UrlEntry], options: RendererOptions) -> None:
    """Log start of a render batch with context."""
    _log_info(f"Rendering {len(entries)} entries into {options.output_dir}")
    _log_debug(f"  Target selector: {options.target_class}")
    _log_debug(
        f"  Timeouts (ms): navigation={options.navigation_timeout_ms} "
        f"idle={options.idle_timeout_ms} export={options.export_timeout_ms}"
    )


def log_entry_start(entry: UrlEntry, index: int, total: int) -> None:
    _log_info(f"[{index}/{total}] {entry.url}")


def log_entry_result(result: EntryResult, total: int) -> None:
    """
    Log the outcome of one entry.

    Args:
        result: EntryResult for the entry
        total: Batch size, for the [i/n] counter
    """
    counter = f"[{result.index}/{total}]"
    elapsed = format_duration(result.elapsed_s)
    if result.success:
        _log_success(f"{counter} {result.entry.output} ({elapsed})")
        if result.page_size:
            _log_debug(f"  Page size: {result.page_size.width}x{result.page_size.height}px")
        if result.output_path:
            _log_debug(f"  PDF: {result.output_path}")
    else:
        _log_error(f"{counter} {result.entry.output} failed ({elapsed})")
        _log_error(f"  {result.error}")


def log_batch_result(results: Sequence[EntryResult], elapsed_time: float) -> None:
    """Log summary of a render batch."""
    succeeded = sum(1 for result in results if result.success)
    failed = len(results) - succeeded

    if failed:
        _log_warning(
            f"Batch finished: {succeeded}/{len(results)} rendered, {failed} failed "
            f"({format_duration(elapsed_time)})"
        )
    else:
        _log_success(f"Batch finished: {succeeded} rendered ({format_duration(elapsed_time)})")
