"""Resource lookup and the shared, single-flight resource cache.

Conversion tables and the charset catalog are opaque byte resources. The
:class:`ResourceLoader` finds them, and the :class:`ResourceCache` makes sure
each parsed table is built at most once per key, however many threads ask for
it at the same time.
"""

import threading
from importlib.resources import files
from pathlib import Path, PurePosixPath
from typing import Any, BinaryIO, Callable, Dict, Hashable, Optional, TypeVar

from ultra_robust_charset.shared.config import ResourceConfig
from ultra_robust_charset.shared.errors import ResourceError, ResourceNotFoundError
from ultra_robust_charset.shared.logging import get_logger
from ultra_robust_charset.shared.result import CacheStats

T = TypeVar("T")

Opener = Callable[[str], BinaryIO]


class _Flight:
    """One in-progress population of a cache key."""

    def __init__(self) -> None:
        self.done = threading.Event()
        self.error: Optional[BaseException] = None


class ResourceLoader:
    """Resolve a resource name to its raw bytes.

    Lookup order: data registered with :meth:`register_data`, then
    ``config.data_dir`` when set, otherwise the bundled data package.
    """

    def __init__(self, config: Optional[ResourceConfig] = None) -> None:
        self.config = config or ResourceConfig()
        self._registered: Dict[str, Opener] = {}
        self._lock = threading.Lock()
        self.logger = get_logger(__name__, component="resource_loader")

    def register_data(self, name: str, opener: Opener) -> None:
        """Register an in-process source for a resource.

        Intended for embedding tables in an application. ``opener`` is called
        with the resource name and must return a readable binary file object.
        """
        self._check_name(name)
        with self._lock:
            self._registered[name] = opener

    def read(self, name: str) -> bytes:
        """Return the full contents of resource ``name``.

        Raises:
            ResourceNotFoundError: If no source provides the resource
            ResourceError: If the resource exists but cannot be read
        """
        self._check_name(name)
        with self._lock:
            opener = self._registered.get(name)

        try:
            if opener is not None:
                with opener(name) as stream:
                    data = stream.read()
            elif self.config.data_dir is not None:
                data = (Path(self.config.data_dir) / name).read_bytes()
            else:
                data = files(self.config.data_package).joinpath(name).read_bytes()
        except FileNotFoundError as e:
            raise ResourceNotFoundError(name) from e
        except ModuleNotFoundError as e:
            raise ResourceError(
                f"data package {self.config.data_package!r} is not importable", name
            ) from e
        except OSError as e:
            raise ResourceError(f"cannot read resource {name!r}: {e}", name) from e

        self.logger.debug(
            "Resource read", extra={"resource": name, "size": len(data)}
        )
        return data

    @staticmethod
    def _check_name(name: str) -> None:
        path = PurePosixPath(name)
        if not name or path.is_absolute() or ".." in path.parts or "\\" in name:
            raise ResourceError(f"invalid resource name: {name!r}", name)


class ResourceCache:
    """Process-scoped cache of parsed resources keyed by class and argument.

    Reads of populated keys take no lock. Population is single-flight per key:
    concurrent first requests for one key run the factory exactly once and
    never observe a partially built value. Failed loads are not cached.
    """

    def __init__(
        self,
        loader: Optional[ResourceLoader] = None,
        correlation_id: Optional[str] = None,
    ) -> None:
        self.loader = loader or ResourceLoader()
        self.stats = CacheStats()
        self._entries: Dict[Hashable, Any] = {}
        self._flights: Dict[Hashable, "_Flight"] = {}
        self._lock = threading.Lock()
        self.logger = get_logger(__name__, correlation_id, "resource_cache")

    def read_resource(self, name: str) -> bytes:
        """Read raw resource bytes through the configured loader."""
        return self.loader.read(name)

    def get(self, key: Hashable, factory: Callable[[], T]) -> T:
        """Return the value cached under ``key``, building it on first use.

        Args:
            key: Resource identifier, e.g. ``("cp", "decode", "latin1.cp")``
            factory: Builds the value. If it raises, every caller waiting on
                the same population attempt receives that exception, and the
                next request retries.

        Returns:
            The cached value
        """
        try:
            value = self._entries[key]
        except KeyError:
            pass
        else:
            # Unlocked; the counter is approximate under contention.
            self.stats.hits += 1
            return value

        with self._lock:
            if key in self._entries:
                self.stats.hits += 1
                return self._entries[key]
            self.stats.misses += 1
            flight = self._flights.get(key)
            owner = flight is None
            if owner:
                flight = _Flight()
                self._flights[key] = flight

        if not owner:
            flight.done.wait()
            if flight.error is not None:
                raise flight.error
            return self._entries[key]

        try:
            value = factory()
        except BaseException as e:
            # Includes KeyboardInterrupt and SystemExit; waiters must never hang
            flight.error = e
            with self._lock:
                del self._flights[key]
                self.stats.failures += 1
            flight.done.set()
            raise

        with self._lock:
            self._entries[key] = value
            del self._flights[key]
            self.stats.loads += 1
        flight.done.set()
        self.logger.debug("Resource cached", extra={"key": repr(key)})
        return value

    def __contains__(self, key: Hashable) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)
