"""Utility functions for toolcomp.

This module provides utility functions including:

- Logging setup and configuration
- Run statistics collection
"""

from toolcomp.utils.logging import (
    RunLogger,
    RunStats,
    configure_logging,
)

__all__ = [
    "RunLogger",
    "RunStats",
    "configure_logging",
]
