"""Correlation-aware logging for charset conversion.

Every record emitted through :class:`CorrelationLogger` carries the component
name, the correlation ID of the conversion it belongs to and any structured
fields bound to the logger (typically the charset being converted).
"""

import logging
from typing import Any, Dict, Optional

PACKAGE_LOGGER = "ultra_robust_charset"

_VALID_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class CorrelationLogger:
    """Logger that attaches correlation and component fields to each record."""

    def __init__(
        self,
        name: str,
        correlation_id: Optional[str] = None,
        component: Optional[str] = None,
        fields: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Initialize correlation logger.

        Args:
            name: Logger name (typically __name__)
            correlation_id: Optional correlation ID for tracking one conversion
            component: Component name, defaults to the last part of ``name``
            fields: Structured fields added to every record
        """
        self.logger = logging.getLogger(name)
        self.correlation_id = correlation_id
        self.component = component or name.split(".")[-1]
        self.fields: Dict[str, Any] = dict(fields or {})

    def bind(self, **fields: Any) -> "CorrelationLogger":
        """Return a logger sharing this one's identity with extra fields bound."""
        merged = dict(self.fields)
        merged.update(fields)
        return CorrelationLogger(
            self.logger.name, self.correlation_id, self.component, merged
        )

    def is_enabled_for(self, level: int) -> bool:
        return self.logger.isEnabledFor(level)

    def _extra(self, extra: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        combined: Dict[str, Any] = {
            "component": self.component,
            "correlation_id": self.correlation_id,
        }
        combined.update(self.fields)
        if extra:
            combined.update(extra)
        return combined

    def debug(self, message: str, extra: Optional[Dict[str, Any]] = None) -> None:
        self.logger.debug(message, extra=self._extra(extra))

    def info(self, message: str, extra: Optional[Dict[str, Any]] = None) -> None:
        self.logger.info(message, extra=self._extra(extra))

    def warning(
        self,
        message: str,
        extra: Optional[Dict[str, Any]] = None,
        exc_info: bool = False,
    ) -> None:
        self.logger.warning(message, extra=self._extra(extra), exc_info=exc_info)

    def error(
        self,
        message: str,
        extra: Optional[Dict[str, Any]] = None,
        exc_info: bool = True,
    ) -> None:
        self.logger.error(message, extra=self._extra(extra), exc_info=exc_info)


def get_logger(
    name: str,
    correlation_id: Optional[str] = None,
    component: Optional[str] = None,
) -> CorrelationLogger:
    """Get a correlation-aware logger instance.

    Args:
        name: Logger name (typically __name__)
        correlation_id: Optional correlation ID for tracking one conversion
        component: Component name for structured logging

    Returns:
        CorrelationLogger instance
    """
    return CorrelationLogger(name, correlation_id, component)


def configure_logging(level: str) -> None:
    """Set the level of the package logger.

    Handlers are left to the application; only the threshold is changed.

    Raises:
        ValueError: If ``level`` is not a standard level name
    """
    if level not in _VALID_LEVELS:
        raise ValueError(f"logging level must be one of {list(_VALID_LEVELS)}")
    logging.getLogger(PACKAGE_LOGGER).setLevel(getattr(logging, level))
