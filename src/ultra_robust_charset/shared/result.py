"""Diagnostics and counters reported by the catalog and resource layers."""

import time
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Dict, Optional


class DiagnosticSeverity(Enum):
    """Severity levels for diagnostic entries."""

    DEBUG = auto()
    INFO = auto()
    WARNING = auto()    # Degraded but usable, e.g. a skipped catalog entry
    ERROR = auto()      # A whole catalog or resource could not be loaded


@dataclass
class DiagnosticEntry:
    """Single diagnostic entry with context information."""

    severity: DiagnosticSeverity
    message: str
    component: str
    details: Optional[Dict[str, Any]] = None
    timestamp: float = field(default_factory=time.time)
    correlation_id: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate diagnostic entry."""
        if not self.message:
            raise ValueError("Diagnostic message cannot be empty")
        if not self.component:
            raise ValueError("Diagnostic component cannot be empty")


@dataclass
class CacheStats:
    """Access counters for a resource cache."""

    hits: int = 0
    misses: int = 0
    loads: int = 0
    failures: int = 0

    @property
    def hit_rate(self) -> float:
        """Fraction of lookups served without loading."""
        total = self.hits + self.misses
        if total == 0:
            return 0.0
        return self.hits / total
