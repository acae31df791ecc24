"""
Shared loguru setup for FOLIO runs.

Every CLI run gets one log directory; each context writes its own
<context>.log file there at DEBUG level while the console shows only what
the user needs. Context wrappers live in contexts/{context}/logger.py.
"""

import sys
from pathlib import Path

from dotenv import load_dotenv
from loguru import logger

from folio import __version__

load_dotenv()

FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <7} | {message}"
CONSOLE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | <level>{level: <7}</level> | <level>{message}</level>"

LEVEL_COLORS = {
    "WARNING": "<yellow>",
    "ERROR": "<red>",
    "CRITICAL": "<bold><red>",
}

HEADER_RULE = "=" * 80


def setup_logger(
    context_name: str,
    log_dir: Path,
    extra_provenance: dict = None,
    level_colors: dict = None,
    console_level: str = "INFO",
) -> Path:
    """
    Point loguru at a run's log directory and write the run header.

    Any sinks from an earlier setup are removed first, so calling this twice
    in one process (tests, chained commands) never duplicates output.

    Args:
        context_name: Log file stem ("content", "render", "validate")
        log_dir: Run directory, created if missing
        extra_provenance: Extra header lines, e.g. {"Content dir": path}
        level_colors: Console color overrides merged over LEVEL_COLORS
        console_level: Minimum console level; list_posts passes "WARNING"
                       so its listing stays clean

    Returns:
        Path to the context's log file
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


def log_provenance(extra_context: dict = None) -> None:
    """Write the header that ties a log file to the command that produced it."""
    logger.info(HEADER_RULE)
    logger.info(f"FOLIO {__version__}")
    logger.info(f"Command: {' '.join(sys.argv)}")
    logger.info(f"Working directory: {Path.cwd()}")
    logger.info(f"Python: {sys.version.split()[0]}")

    for key, value in (extra_context or {}).items():
        logger.info(f"{key}: {value}")

    logger.info(HEADER_RULE)
