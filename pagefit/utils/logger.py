"""
Shared loguru setup for pagefit runs.

Every render run writes one log file, `<log_dir>/<context>.log`, that opens
with a provenance header (pagefit version, command line, working directory,
interpreter) followed by per-entry progress. The CLI creates a timestamped
log_dir under LOGS_PATH for each run; see scripts/render_pdf.py.

Contexts do not call loguru directly. They go through their own prefixed
wrappers in contexts/{context}/logger.py, which call setup_logger() here.
"""

import sys
from pathlib import Path
from typing import Dict, Optional

from dotenv import load_dotenv
from loguru import logger

from pagefit import __version__

load_dotenv()

FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <7} | {message}"
CONSOLE_FORMAT = "{time:HH:mm:ss} | <level>{level: <7}</level> | <level>{message}</level>"

# Console colors; SUCCESS keeps loguru's green so finished entries stand out
LEVEL_COLORS = {
    "WARNING": "<yellow>",
    "ERROR": "<red>",
    "CRITICAL": "<bold><red>",
}


def setup_logger(
    context_name: str,
    log_dir: Path,
    extra_provenance: Optional[Dict[str, object]] = None,
    level_colors: Optional[Dict[str, str]] = None,
    console_level: str = "INFO",
) -> Path:
    """
    Route loguru output to a run log file and the console.

    Any sinks from an earlier run in the same process are removed first, so a
    long-lived process that renders several batches gets one file per batch.

    Args:
        context_name: Log file stem, e.g. "render" -> render.log
        log_dir: Directory for this run (created if missing)
        extra_provenance: Run settings for the header, e.g. the target selector
        level_colors: Overrides for LEVEL_COLORS
        console_level: Minimum console level; "DEBUG" with the CLI's --verbose.
            The file always records DEBUG.

    Returns:
        Path to the log file

    Example:
        log_file = setup_logger(
            "render",
            Path("outs/logs/render_20251114_123456"),
            extra_provenance={"Target selector": "#content", "Idle timeout (ms)": 30000},
        )
    """
    log_dir.mkdir(exist_ok=True, parents=True)
    log_file = log_dir / f"{context_name}.log"

    logger.remove()

    for level_name, color in {**LEVEL_COLORS, **(level_colors or {})}.items():
        logger.level(level_name, color=color)

    logger.add(log_file, format=FILE_FORMAT, level="DEBUG")
    logger.add(sys.stdout, format=CONSOLE_FORMAT, level=console_level, colorize=True)

    log_provenance(extra_provenance)

    return log_file


def log_provenance(extra_context: Optional[Dict[str, object]] = None) -> None:
    """Write the run header: pagefit version, invocation, and any run settings."""
    logger.info("=" * 80)
    logger.info(f"pagefit {__version__}")
    logger.info(f"Command: {' '.join(sys.argv)}")
    logger.info(f"Working directory: {Path.cwd()}")
    logger.info(f"Python: {sys.version.split()[0]}")

    for key, value in (extra_context or {}).items():
        logger.info(f"{key}: {value}")

    logger.info("=" * 80)
