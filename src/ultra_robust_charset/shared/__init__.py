"""Shared utilities for charset conversion.

This module provides the configuration objects, error taxonomy, diagnostic
types and logging helpers used across the character, catalog and API layers.
"""

from .config import (
    CharsetConfig,
    ConfigError,
    ConfigValidationError,
    ResourceConfig,
    StreamConfig,
)
from .errors import (
    BadClassError,
    CharsetError,
    DirectionError,
    NotFoundError,
    ResourceError,
    ResourceNotFoundError,
    ShortWriteError,
)
from .logging import (
    CorrelationLogger,
    configure_logging,
    get_logger,
)
from .result import (
    CacheStats,
    DiagnosticEntry,
    DiagnosticSeverity,
)

__all__ = [
    "CharsetConfig",
    "ConfigError",
    "ConfigValidationError",
    "ResourceConfig",
    "StreamConfig",
    "BadClassError",
    "CharsetError",
    "DirectionError",
    "NotFoundError",
    "ResourceError",
    "ResourceNotFoundError",
    "ShortWriteError",
    "CorrelationLogger",
    "configure_logging",
    "get_logger",
    "CacheStats",
    "DiagnosticEntry",
    "DiagnosticSeverity",
]
