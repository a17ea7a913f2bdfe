"""
Transport context logger.

Provides logging interface for the transport context with automatic [transport] prefix.
All transport modules should import from this module, not from utils.logger directly.
"""

from loguru import logger

CONTEXT_PREFIX = "[transport]"


# Wrapper functions with automatic [transport] prefix


def _log_warning(message: str) -> None:
    """Log warning message with [transport] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [transport] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


def log_retry_scheduled(attempt_number: int, delay_s: float, error: BaseException) -> None:
    """Log a failed attempt that is about to be retried."""
    _log_warning(
        f"Attempt {attempt_number} failed ({type(error).__name__}: {error}), "
        f"retrying in {delay_s:.1f}s"
    )
