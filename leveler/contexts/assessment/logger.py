"""
Assessment context logger.

Provides logging interface for the assessment context with automatic [assess] prefix.
All assessment modules should import from this module, not from utils.logger directly.
"""

from pathlib import Path

from loguru import logger

from leveler.utils.logger import setup_logger as _setup_logger

CONTEXT_PREFIX = "[assess]"


def setup_assessment_logger(log_dir: Path, report_id: str = "") -> Path:
    """
    Setup logger for the assessment context.

    Args:
        log_dir: Directory for this assessment session
        report_id: Report being edited (recorded in provenance)

    Returns:
        Path to log file
    """
    return _setup_logger(
        context_name="assess",
        log_dir=log_dir,
        extra_provenance={"Report": report_id} if report_id else None,
    )


# Wrapper functions with automatic [assess] prefix


def _log_info(message: str) -> None:
    """Log info message with [assess] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_success(message: str) -> None:
    """Log success message with [assess] prefix."""
    logger.success(f"{CONTEXT_PREFIX} {message}")


def _log_error(message: str) -> None:
    """Log error message with [assess] prefix."""
    logger.error(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [assess] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [assess] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


# High-level save logging helpers


def log_save_started(response_count: int, trigger: str) -> None:
    _log_debug(f"Saving {response_count} responses ({trigger})")


def log_save_result(state, elapsed_time: float) -> None:
    """
    Log the outcome of a save.

    Args:
        state: SaveState the save resolved to
        elapsed_time: Seconds spent awaiting the save function
    """
    if state.status.value == "saved":
        _log_success(f"Assessment saved ({elapsed_time:.2f}s)")
    else:
        _log_error(f"Assessment save failed ({elapsed_time:.2f}s)")
        _log_error(f"  Error: {state.error}")
