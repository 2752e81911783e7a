"""
Generation context logger.

Provides logging interface for generation context with automatic [generate] prefix.
All generation modules should import from this module, not from utils.logger directly.
"""

from pathlib import Path
from typing import List

from dotenv import load_dotenv
from loguru import logger

from dossier.utils.config import get_setting
from dossier.utils.logger import setup_logger as _setup_logger

load_dotenv()

CONTEXT_PREFIX = "[generate]"


def setup_generation_logger(log_dir: Path, console: bool = True) -> Path:
    """
    Setup logger for generation context.

    Args:
        log_dir: Directory for this generation session
        console: Also log to stdout

    Returns:
        Path to log file
    """
    return _setup_logger(
        context_name="generate",
        log_dir=log_dir,
        extra_provenance={"LLM provider": get_setting("llm.provider")},
        console=console,
    )


# Wrapper functions with automatic [generate] prefix


def _log_info(message: str) -> None:
    """Log info message with [generate] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_success(message: str) -> None:
    """Log success message with [generate] prefix."""
    logger.success(f"{CONTEXT_PREFIX} {message}")


def _log_error(message: str) -> None:
    """Log error message with [generate] prefix."""
    logger.error(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [generate] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [generate] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


# High-level generation-specific logging helpers


def log_request(provider_name: str, part_summaries: List[str]) -> None:
    """Log the outgoing request layout (never attachment bytes)."""
    _log_info(f"Requesting dossier from {provider_name} ({len(part_summaries)} parts)")
    for i, summary in enumerate(part_summaries, 1):
        _log_debug(f"  Part {i}: {summary}")


def log_stream_result(fragment_count: int, char_count: int, cancelled: bool, elapsed_time: float) -> None:
    if cancelled:
        _log_warning(f"Stream cancelled after {fragment_count} fragments ({elapsed_time:.2f}s)")
    else:
        _log_info(f"Stream complete: {fragment_count} fragments, {char_count} chars ({elapsed_time:.2f}s)")


def log_parse_failure(kind: str, raw_text: str) -> None:
    """
    Log a response contract violation with the raw response for diagnosis.

    Uses opt(raw=True) so the multi-line response keeps its formatting.
    """
    _log_error(f"Response contract violation: {kind}")
    logger.opt(raw=True).debug(f"\n{'=' * 80}\nRAW RESPONSE:\n{'=' * 80}\n{raw_text}\n")
