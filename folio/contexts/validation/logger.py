"""
Validation context logger.

Provides logging interface for validation context with automatic [validate] prefix.
All validation modules should import from this module, not from utils.logger directly.
"""

from pathlib import Path

from loguru import logger

from folio.utils.logger import setup_logger as _setup_logger

CONTEXT_PREFIX = "[validate]"


def setup_validation_logger(log_dir: Path, content_dir: Path = None) -> Path:
    """
    Setup logger for validation context.

    Args:
        log_dir: Directory for this validation session
        content_dir: Content root, recorded in the provenance header

    Returns:
        Path to log file
    """
    return _setup_logger(
        context_name="validate",
        log_dir=log_dir,
        extra_provenance={"Content dir": content_dir},
    )


def _log_info(message: str) -> None:
    """Log info message with [validate] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_success(message: str) -> None:
    """Log success message with [validate] prefix."""
    logger.success(f"{CONTEXT_PREFIX} {message}")


def _log_error(message: str) -> None:
    """Log error message with [validate] prefix."""
    logger.error(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [validate] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [validate] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


def log_validation_start(content_dir: Path) -> None:
    """Log start of validation."""
    _log_info(f"Validating content in {content_dir}")


def log_validation_result(result, elapsed_time: float, verbose: bool = False) -> None:
    """
    Log validation result with issue details.

    Args:
        result: ValidationResult from validate_collection()
        elapsed_time: Time taken to validate
        verbose: Show every issue (default shows the first 10 errors and 5 warnings)
    """
    summary = (
        f"{result.documents_checked} documents, {result.shortcodes_checked} shortcodes "
        f"({elapsed_time:.2f}s)"
    )
    if result.is_valid:
        _log_success(f"Validation passed: {summary}")
    else:
        _log_error(f"Validation failed: {len(result.errors)} errors in {summary}")

    error_limit = None if verbose else 10
    for issue in result.errors[:error_limit]:
        _log_error(f"  {issue.location}: {issue.message}")
    if error_limit and len(result.errors) > error_limit:
        _log_error(f"  ... and {len(result.errors) - error_limit} more errors")

    if result.warnings:
        _log_warning(f"{len(result.warnings)} warnings detected")
        warning_limit = None if verbose else 5
        for issue in result.warnings[:warning_limit]:
            _log_debug(f"  {issue.location}: {issue.message}")
        if warning_limit and len(result.warnings) > warning_limit:
            _log_debug(f"  ... and {len(result.warnings) - warning_limit} more warnings")
