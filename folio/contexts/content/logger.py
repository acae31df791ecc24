"""
Content context logger.

Provides logging interface for content context with automatic [content] prefix.
All content modules should import from this module, not from utils.logger directly.
"""

from pathlib import Path

from loguru import logger

from folio.utils.logger import setup_logger as _setup_logger

CONTEXT_PREFIX = "[content]"


def setup_content_logger(
    log_dir: Path, content_dir: Path = None, console_level: str = "INFO"
) -> Path:
    """
    Setup logger for content context.

    Args:
        log_dir: Directory for this session
        content_dir: Content root, recorded in the provenance header
        console_level: Minimum console level (listings keep stdout for their own output)

    Returns:
        Path to log file
    """
    return _setup_logger(
        context_name="content",
        log_dir=log_dir,
        extra_provenance={"Content dir": content_dir},
        console_level=console_level,
    )


def _log_info(message: str) -> None:
    """Log info message with [content] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_success(message: str) -> None:
    """Log success message with [content] prefix."""
    logger.success(f"{CONTEXT_PREFIX} {message}")


def _log_error(message: str) -> None:
    """Log error message with [content] prefix."""
    logger.error(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [content] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [content] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


def log_load_result(collection, elapsed_time: float) -> None:
    """
    Log the outcome of loading a content tree.

    Args:
        collection: ContentCollection from ContentCollection.load()
        elapsed_time: Time taken to load
    """
    posts = collection.posts(include_drafts=True)
    drafts = sum(1 for post in posts if post.draft)
    pages = collection.pages()

    if collection.failures:
        _log_warning(
            f"Loaded {len(collection)} documents with {len(collection.failures)} failures "
            f"({elapsed_time:.2f}s)"
        )
        for failure in collection.failures:
            _log_error(f"  {failure.path}: {failure.error.message}")
    else:
        _log_success(f"Loaded {len(collection)} documents ({elapsed_time:.2f}s)")

    _log_info(f"  Posts: {len(posts)} ({drafts} drafts)")
    _log_info(f"  Pages: {len(pages)}")
