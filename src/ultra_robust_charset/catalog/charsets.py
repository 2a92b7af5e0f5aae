"""Charset catalog: public charset names and aliases mapped to codec classes.

The catalog is read from a JSON object whose keys are canonical charset names
and whose values are either a full entry::

    "latin1": {"aliases": ["iso-8859-1"], "description": "...",
               "class": "cp", "argument": "latin1.cp"}

or an alias entry naming one canonical charset::

    "iso-ir-100": {"alias": "latin1"}

Loading never raises. Problems are recorded as diagnostics and logged, and
whatever could be loaded stays usable.
"""

import json
import string
import threading
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from ultra_robust_charset.shared.errors import CharsetError
from ultra_robust_charset.shared.logging import get_logger
from ultra_robust_charset.shared.result import DiagnosticEntry, DiagnosticSeverity

_NAME_TABLE = str.maketrans(
    string.ascii_uppercase + "_", string.ascii_lowercase + "-"
)

CatalogSource = Callable[[], bytes]


def normalized_name(name: str) -> str:
    """Fold ASCII capitals to lower case and map ``_`` to ``-``."""
    return name.translate(_NAME_TABLE)


@dataclass
class CharsetDescriptor:
    """Catalog entry for one charset.

    Attributes:
        name: Canonical charset name (normalized on creation)
        class_name: Codec class that implements the charset
        argument: Argument handed to the class factories
        aliases: Alternative names (normalized, never containing ``name``)
        description: Human readable description
    """

    name: str
    class_name: str
    argument: str = ""
    aliases: List[str] = field(default_factory=list)
    description: str = ""

    def __post_init__(self) -> None:
        """Validate and normalize the descriptor."""
        if not self.name:
            raise ValueError("Charset name cannot be empty")
        if not self.class_name:
            raise ValueError(f"Charset {self.name!r} has no codec class")
        self.name = normalized_name(self.name)
        aliases: List[str] = []
        for alias in self.aliases:
            alias = normalized_name(alias)
            if alias and alias != self.name and alias not in aliases:
                aliases.append(alias)
        self.aliases = aliases


class Catalog:
    """Normalized charset name to :class:`CharsetDescriptor` mapping.

    When built with a ``source``, the catalog reads it on first use, exactly
    once, under a lock. Lookups after that take no lock.
    """

    def __init__(
        self,
        source: Optional[CatalogSource] = None,
        correlation_id: Optional[str] = None,
    ) -> None:
        self._entries: Dict[str, CharsetDescriptor] = {}
        self._source = source
        self._loaded = source is None
        self._lock = threading.RLock()
        self.correlation_id = correlation_id
        self.diagnostics: List[DiagnosticEntry] = []
        self.logger = get_logger(__name__, correlation_id, "catalog")

    def register(self, descriptor: CharsetDescriptor, override: bool = False) -> bool:
        """Add a charset and its aliases.

        An existing entry under the canonical name is kept unless
        ``override`` is set. Aliases are attached where free, or always when
        ``override`` is set.

        Returns:
            True if the descriptor was registered
        """
        with self._lock:
            if not override and descriptor.name in self._entries:
                return False
            self._entries[descriptor.name] = descriptor
            for alias in descriptor.aliases:
                if override or alias not in self._entries:
                    self._entries[alias] = descriptor
            return True

    def lookup(self, name: str) -> Optional[CharsetDescriptor]:
        """Return the descriptor for a charset name or alias, or None."""
        self.ensure_loaded()
        return self._entries.get(normalized_name(name))

    def names(self) -> List[str]:
        """Return the canonical names of all charsets, sorted."""
        self.ensure_loaded()
        entries = dict(self._entries)
        return sorted(
            name for name, descriptor in entries.items()
            if descriptor.name == name and entries.get(name) is descriptor
        )

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.lookup(name) is not None

    def __len__(self) -> int:
        return len(self.names())

    def ensure_loaded(self) -> None:
        """Read the catalog source if that has not happened yet."""
        if self._loaded:
            return
        with self._lock:
            if self._loaded:
                return
            try:
                self._populate()
            finally:
                self._loaded = True

    def _populate(self) -> None:
        if self._source is None:
            return
        try:
            data = self._source()
        except CharsetError as e:
            self._diagnose(
                DiagnosticSeverity.ERROR, f"Cannot read charset catalog: {e}"
            )
            return
        count = self.load_json(data)
        self.logger.debug("Charset catalog loaded", extra={"charsets": count})

    def load_json(self, data: bytes) -> int:
        """Register the charsets described by a JSON catalog document.

        Returns:
            Number of canonical charsets registered
        """
        try:
            entries = json.loads(data)
        except ValueError as e:
            self._diagnose(
                DiagnosticSeverity.ERROR, f"Cannot decode charset catalog: {e}"
            )
            return 0
        if not isinstance(entries, dict):
            self._diagnose(
                DiagnosticSeverity.ERROR, "Charset catalog must be a JSON object"
            )
            return 0

        aliases: Dict[str, str] = {}
        registered = 0
        for name, entry in entries.items():
            if not isinstance(entry, dict):
                self._skip(name, "entry is not an object")
                continue
            if "alias" in entry:
                target = entry["alias"]
                if not isinstance(target, str) or not target:
                    self._skip(name, "alias target must be a non-empty string")
                    continue
                aliases[name] = target
                continue
            descriptor = self._descriptor(name, entry)
            if descriptor is not None and self.register(descriptor):
                registered += 1

        for alias, target in aliases.items():
            self._register_alias(alias, target)
        return registered

    def _descriptor(
        self, name: str, entry: Dict[str, Any]
    ) -> Optional[CharsetDescriptor]:
        class_name = entry.get("class")
        argument = entry.get("argument", "")
        alias_list = entry.get("aliases", [])
        description = entry.get("description", "")
        if not isinstance(class_name, str) or not class_name:
            self._skip(name, "missing codec class")
            return None
        if not isinstance(argument, str) or not isinstance(description, str):
            self._skip(name, "argument and description must be strings")
            return None
        if not isinstance(alias_list, list) or not all(
            isinstance(alias, str) for alias in alias_list
        ):
            self._skip(name, "aliases must be a list of strings")
            return None
        try:
            return CharsetDescriptor(
                name=name,
                class_name=class_name,
                argument=argument,
                aliases=alias_list,
                description=description,
            )
        except ValueError as e:
            self._skip(name, str(e))
            return None

    def _register_alias(self, alias: str, target: str) -> None:
        alias = normalized_name(alias)
        target = normalized_name(target)
        with self._lock:
            descriptor = self._entries.get(target)
            if descriptor is None:
                self._skip(alias, f"alias target {target!r} is not in the catalog")
                return
            if descriptor.name != target:
                # Only one level of indirection is allowed.
                self._skip(alias, f"alias target {target!r} is itself an alias")
                return
            if alias in self._entries:
                return
            self._entries[alias] = descriptor
            if alias not in descriptor.aliases:
                descriptor.aliases.append(alias)

    def _skip(self, name: str, reason: str) -> None:
        self._diagnose(
            DiagnosticSeverity.WARNING,
            f"Skipping catalog entry {name!r}: {reason}",
            {"charset": name},
        )

    def _diagnose(
        self,
        severity: DiagnosticSeverity,
        message: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.diagnostics.append(
            DiagnosticEntry(
                severity=severity,
                message=message,
                component="catalog",
                details=details,
                correlation_id=self.correlation_id,
            )
        )
        self.logger.warning(message, extra=details)
