"""
Rendering context logger.

Provides logging interface for rendering context with automatic [export] prefix.
All rendering modules should import from this module, not from utils.logger directly.
"""

from pathlib import Path

from dotenv import load_dotenv
from loguru import logger

from dossier.utils.config import get_setting
from dossier.utils.logger import setup_logger as _setup_logger

load_dotenv()

CONTEXT_PREFIX = "[export]"


def setup_rendering_logger(log_dir: Path, console: bool = True) -> Path:
    """
    Setup logger for rendering context.

    Args:
        log_dir: Directory for this export session
        console: Also log to stdout

    Returns:
        Path to log file

    Example:
        from dossier.contexts.rendering.logger import setup_rendering_logger

        log_file = setup_rendering_logger(log_dir)
    """
    return _setup_logger(
        context_name="export",
        log_dir=log_dir,
        extra_provenance={"Raster scale": get_setting("export.raster_scale")},
        console=console,
    )


# Wrapper functions with automatic [export] prefix


def _log_info(message: str) -> None:
    """Log info message with [export] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_success(message: str) -> None:
    """Log success message with [export] prefix."""
    logger.success(f"{CONTEXT_PREFIX} {message}")


def _log_error(message: str) -> None:
    """Log error message with [export] prefix."""
    logger.error(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [export] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [export] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


# High-level rendering-specific logging helpers


def log_export_start(filename: str, template: str) -> None:
    _log_info(f"Starting export: {filename}")
    _log_debug(f"  Template: {template}")


def log_raster(width_px: int, height_px: int, page_height_px: float) -> None:
    _log_debug(
        f"  Raster: {width_px}x{height_px}px ({height_px / page_height_px:.2f} pages tall)"
    )


def log_export_result(filename: str, page_count, elapsed_time: float) -> None:
    """
    Log export result.

    Args:
        filename: Output file name
        page_count: Pages in the assembled PDF (None if it could not be read back)
        elapsed_time: Time taken to export
    """
    pages = "unknown" if page_count is None else page_count
    _log_success(f"Exported {filename}: {pages} pages ({elapsed_time:.2f}s)")
