"""
Session logging for LEVELER scripts.

Each script run gets its own log directory (e.g. outs/logs/save_20251114_123456)
holding one <context>.log file with everything at DEBUG, while INFO and above
is echoed to stderr. stdout stays free for the JSON the scripts print.

Contexts wrap setup_logger() in contexts/{context}/logger.py and add their own
message prefix; modules never call this file directly.
"""

import sys
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from loguru import logger

from leveler import __version__

load_dotenv()

FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <7} | {message}"
CONSOLE_FORMAT = "{time:HH:mm:ss} | <level>{level: <7}</level> | <level>{message}</level>"

LEVEL_COLORS = {
    "WARNING": "<yellow>",
    "ERROR": "<red>",
    "CRITICAL": "<bold><red>",
}


def setup_logger(
    context_name: str,
    log_dir: Path,
    extra_provenance: Optional[dict] = None,
    level_colors: Optional[dict] = None,
    console_level: str = "INFO",
) -> Path:
    """
    Route loguru output for one script session.

    Replaces any existing sinks with a DEBUG file sink in log_dir and a
    colorized stderr sink, then writes the provenance header.

    Args:
        context_name: Names the log file ("ladder", "assess")
        log_dir: Session directory, created if missing
        extra_provenance: Session facts for the header, e.g. {"Report": report_id}
        level_colors: Per-level color overrides on top of LEVEL_COLORS
        console_level: Minimum level echoed to stderr

    Returns:
        Path to the session log file

    Example:
        log_file = setup_logger("assess", Path("outs/logs/save_20251114_123456"),
                                extra_provenance={"Report": "ada@example.com|2025-H2|self"})
    """
    log_dir.mkdir(exist_ok=True, parents=True)
    log_file = log_dir / f"{context_name}.log"

    logger.remove()
    for level_name, color in {**LEVEL_COLORS, **(level_colors or {})}.items():
        logger.level(level_name, color=color)

    logger.add(log_file, format=FILE_FORMAT, level="DEBUG")
    logger.add(sys.stderr, format=CONSOLE_FORMAT, level=console_level, colorize=True)

    log_provenance(extra_provenance)
    return log_file


def log_provenance(extra_context: Optional[dict] = None) -> None:
    """Write the session header: version, invocation, cwd, Python, then extras."""
    logger.info("=" * 80)
    logger.info(f"LEVELER {__version__}")
    logger.info(f"Command: {' '.join(sys.argv)}")
    logger.info(f"Working directory: {Path.cwd()}")
    logger.info(f"Python: {sys.version.split()[0]}")

    for key, value in (extra_context or {}).items():
        logger.info(f"{key}: {value}")

    logger.info("=" * 80)
