"""Timestamp formatting utilities."""

from datetime import datetime


def now() -> str:
    """Compact local timestamp for log directory names (e.g., "20261019_154212")."""
    return datetime.now().strftime("%Y%m%d_%H%M%S")
