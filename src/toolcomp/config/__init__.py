"""Configuration management for toolcomp.

This module provides configuration management using Pydantic models.
Configuration can be provided via CLI arguments or defaults.

Key classes:
- GeometryConfig: Tolerances for geometric comparisons
- OutputConfig: G-code output settings
- LoggingConfig: Logging settings
- ToolcompSettings: Main application settings
"""

from toolcomp.config.settings import (
    ArcFormat,
    GeometryConfig,
    LoggingConfig,
    OutputConfig,
    OutputUnit,
    ToolcompSettings,
    get_default_settings,
)

__all__ = [
    "ArcFormat",
    "GeometryConfig",
    "LoggingConfig",
    "OutputConfig",
    "OutputUnit",
    "ToolcompSettings",
    "get_default_settings",
]
