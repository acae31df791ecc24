"""
Templating context logger.

Provides logging interface for templating context with automatic [shortcode] prefix.
All templating modules should import from this module, not from utils.logger directly.
"""

from pathlib import Path

from loguru import logger

from folio.utils.logger import setup_logger as _setup_logger

CONTEXT_PREFIX = "[shortcode]"


def setup_templating_logger(log_dir: Path, phase: str = "render") -> Path:
    """
    Setup logger for templating context.

    Args:
        log_dir: Directory for this templating session
        phase: Phase name for provenance ("render" or "list")

    Returns:
        Path to log file
    """
    return _setup_logger(
        context_name="shortcode",
        log_dir=log_dir,
        extra_provenance={"Phase": phase},
    )


def _log_info(message: str) -> None:
    """Log info message with [shortcode] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_success(message: str) -> None:
    """Log success message with [shortcode] prefix."""
    logger.success(f"{CONTEXT_PREFIX} {message}")


def _log_error(message: str) -> None:
    """Log error message with [shortcode] prefix."""
    logger.error(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [shortcode] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [shortcode] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


def log_render_start(document_name: str, source_path: Path, log_file: Path) -> None:
    """Log start of rendering with context."""
    _log_info(f"Rendering {document_name}")
    _log_info(f"Log file: {log_file}")
    _log_debug(f"Source: {source_path}")


def log_render_result(document_name: str, result, elapsed_time: float) -> None:
    """
    Log a document render result.

    Args:
        document_name: Document identifier (slug or relative path)
        result: RenderResult from render_tree()
        elapsed_time: Time taken
    """
    if result.success:
        _log_success(
            f"{document_name}: {result.shortcode_count} shortcodes rendered ({elapsed_time:.2f}s)"
        )
        if result.output_path:
            _log_info(f"  Output: {result.output_path}")
    else:
        _log_error(f"Failed to render {document_name} ({elapsed_time:.2f}s)")
        if result.error:
            _log_error(f"  Error: {result.error}")
