"""Configuration classes for charset conversion.

This module provides the configuration objects for the streaming adapters and
the resource layer, plus the frozen top-level :class:`CharsetConfig` that a
:class:`~ultra_robust_charset.catalog.context.CharsetContext` is built from.
"""

import json
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional

DEFAULT_READ_SIZE = 4096
DEFAULT_CATALOG_NAME = "charsets.json"
DEFAULT_DATA_PACKAGE = "ultra_robust_charset.data"

_COMPONENTS = ("stream", "resources")


@dataclass
class StreamConfig:
    """Configuration for the translating reader and writer."""

    read_size: int = DEFAULT_READ_SIZE

    def __post_init__(self) -> None:
        """Validate stream configuration."""
        if self.read_size <= 0:
            raise ValueError("read_size must be > 0")


@dataclass
class ResourceConfig:
    """Where the catalog and conversion tables are looked up."""

    data_dir: Optional[str] = None
    catalog_name: str = DEFAULT_CATALOG_NAME
    data_package: str = DEFAULT_DATA_PACKAGE

    def __post_init__(self) -> None:
        """Validate resource configuration."""
        if not self.catalog_name:
            raise ValueError("catalog_name cannot be empty")
        if not self.data_package:
            raise ValueError("data_package cannot be empty")


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigValidationError(ConfigError):
    """Exception raised when configuration validation fails."""

    def __init__(self, message: str, field_name: Optional[str] = None,
                 suggestions: Optional[List[str]] = None):
        super().__init__(message)
        self.field_name = field_name
        self.suggestions = suggestions or []


@dataclass(frozen=True)
class CharsetConfig:
    """Complete configuration for a charset conversion context.

    Immutable, so one instance can be shared by every stream created from a
    context.
    """

    stream: StreamConfig = field(default_factory=StreamConfig)
    resources: ResourceConfig = field(default_factory=ResourceConfig)
    logging_level: str = "WARNING"
    correlation_id: Optional[str] = None
    load_python_codecs: bool = False

    def __post_init__(self) -> None:
        """Validate the complete configuration."""
        try:
            self.stream.__post_init__()
            self.resources.__post_init__()
        except ValueError as e:
            raise ConfigValidationError(str(e)) from e

        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if self.logging_level not in valid_levels:
            raise ConfigValidationError(
                f"logging_level must be one of {valid_levels}",
                field_name="logging_level",
            )

    def override(self, **kwargs: Any) -> "CharsetConfig":
        """Create a new configuration with specific overrides.

        Args:
            **kwargs: Fields to override; component fields use the
                ``component__field`` notation

        Returns:
            New CharsetConfig instance with overrides applied

        Example:
            >>> config = CharsetConfig()
            >>> new_config = config.override(
            ...     stream__read_size=512,
            ...     logging_level="DEBUG",
            ... )
        """
        nested: Dict[str, Dict[str, Any]] = {}
        top_level: Dict[str, Any] = {}
        for key, value in kwargs.items():
            if "__" in key:
                component, field_name = key.split("__", 1)
                if component not in _COMPONENTS:
                    raise ConfigValidationError(
                        f"Unknown configuration component: {component}",
                        field_name=key,
                    )
                nested.setdefault(component, {})[field_name] = value
            else:
                top_level[key] = value

        try:
            for component, values in nested.items():
                top_level[component] = replace(getattr(self, component), **values)
            return replace(self, **top_level)
        except (TypeError, ValueError) as e:
            raise ConfigValidationError(str(e)) from e

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary format."""
        return {
            "stream": {
                "read_size": self.stream.read_size,
            },
            "resources": {
                "data_dir": self.resources.data_dir,
                "catalog_name": self.resources.catalog_name,
                "data_package": self.resources.data_package,
            },
            "logging_level": self.logging_level,
            "correlation_id": self.correlation_id,
            "load_python_codecs": self.load_python_codecs,
        }

    def to_json(self, indent: int = 2) -> str:
        """Convert configuration to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CharsetConfig":
        """Create configuration from dictionary.

        Unknown keys are rejected so that typos do not pass silently.
        """
        known = {"stream", "resources", "logging_level", "correlation_id",
                 "load_python_codecs"}
        unknown = set(data) - known
        if unknown:
            raise ConfigValidationError(
                f"Unknown configuration keys: {sorted(unknown)}"
            )

        values = dict(data)
        try:
            if "stream" in values:
                values["stream"] = StreamConfig(**values["stream"])
            if "resources" in values:
                values["resources"] = ResourceConfig(**values["resources"])
        except (TypeError, ValueError) as e:
            raise ConfigValidationError(str(e)) from e
        return cls(**values)

    @classmethod
    def from_json(cls, json_str: str) -> "CharsetConfig":
        """Create configuration from JSON string."""
        return cls.from_dict(json.loads(json_str))
