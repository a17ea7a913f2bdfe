"""
Definition context logger.

Provides logging interface for the ladder definition context with automatic [ladder] prefix.
All definition modules should import from this module, not from utils.logger directly.
"""

from pathlib import Path

from loguru import logger

from leveler.utils.logger import setup_logger as _setup_logger

CONTEXT_PREFIX = "[ladder]"


def setup_definition_logger(log_dir: Path, source: str = "") -> Path:
    """
    Setup logger for the definition context.

    Args:
        log_dir: Directory for this parsing session
        source: Ladder file being parsed (recorded in provenance)

    Returns:
        Path to log file
    """
    return _setup_logger(
        context_name="ladder",
        log_dir=log_dir,
        extra_provenance={"Ladder source": source} if source else None,
    )


# Wrapper functions with automatic [ladder] prefix


def _log_debug(message: str) -> None:
    """Log debug message with [ladder] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


def log_parse_summary(categories: list, line_count: int) -> None:
    """Log what a parse produced (counts only, at debug level)."""
    core_area_count = sum(len(category.core_areas) for category in categories)
    level_count = sum(
        len(core_area.levels) for category in categories for core_area in category.core_areas
    )
    _log_debug(
        f"Parsed {line_count} lines into {len(categories)} categories, "
        f"{core_area_count} core areas, {level_count} levels"
    )
