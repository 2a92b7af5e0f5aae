"""Charset conversion context.

A :class:`CharsetContext` bundles everything a conversion needs: the
configuration, resource loader and cache, codec class registry and charset
catalog. Contexts are independent of each other; the module-level functions in
:mod:`ultra_robust_charset.api` share one lazily created default context.
"""

from typing import Any, BinaryIO, Dict, List, Optional, Tuple

from ultra_robust_charset.character.stream import TranslatingReader, TranslatingWriter
from ultra_robust_charset.character.translator import Translator
from ultra_robust_charset.shared.config import CharsetConfig
from ultra_robust_charset.shared.errors import BadClassError, NotFoundError
from ultra_robust_charset.shared.logging import configure_logging, get_logger

from .charsets import Catalog, CharsetDescriptor
from .registry import ClassRegistry, CodecClass, TranslatorFactory
from .resources import Opener, ResourceCache, ResourceLoader


class CharsetContext:
    """Resolve charset names to translators and build translating streams.

    Attributes:
        config: Configuration the context was built from
        loader: Resource loader for tables and the catalog
        resources: Cache of parsed tables, shared by every translator
        classes: Registered codec classes
        catalog: Charset catalog, read from ``config.resources.catalog_name``
            on first lookup

    Examples:
        >>> context = CharsetContext()
        >>> reader = context.new_reader("latin1", io.BytesIO(b"caf\\xe9"))
        >>> reader.read()
        b'caf\\xc3\\xa9'
    """

    def __init__(
        self,
        config: Optional[CharsetConfig] = None,
        loader: Optional[ResourceLoader] = None,
    ) -> None:
        """Initialize a conversion context.

        Args:
            config: Context configuration. When given, its logging level is
                applied to the package logger.
            loader: Resource loader, defaults to one built from
                ``config.resources``
        """
        if config is not None:
            configure_logging(config.logging_level)
        self.config = config or CharsetConfig()
        self.correlation_id = self.config.correlation_id
        self.logger = get_logger(__name__, self.correlation_id, "charset_context")

        self.loader = loader or ResourceLoader(self.config.resources)
        self.resources = ResourceCache(self.loader, self.correlation_id)
        self.classes = ClassRegistry.with_builtins(self.correlation_id)
        self.catalog = Catalog(self._read_catalog, self.correlation_id)

        if self.config.load_python_codecs:
            from ultra_robust_charset.bindings.pycodecs import register_python_codecs

            register_python_codecs(self)

    def _read_catalog(self) -> bytes:
        return self.loader.read(self.config.resources.catalog_name)

    def info(self, name: str) -> Optional[CharsetDescriptor]:
        """Return the catalog entry for a charset name or alias, or None."""
        return self.catalog.lookup(name)

    def names(self) -> List[str]:
        """Return the canonical names of every known charset, sorted."""
        return self.catalog.names()

    def resolve(self, name: str) -> Tuple[CodecClass, str]:
        """Find the codec class and argument implementing a charset.

        Raises:
            NotFoundError: If the name is not in the catalog
            BadClassError: If the charset's codec class is not registered
        """
        descriptor = self.catalog.lookup(name)
        if descriptor is None:
            raise NotFoundError(name)
        try:
            codec_class = self.classes.get(descriptor.class_name)
        except BadClassError:
            raise BadClassError(descriptor.class_name, descriptor.name) from None
        return codec_class, descriptor.argument

    def translator_from(self, name: str) -> Translator:
        """Create a translator from charset ``name`` to UTF-8."""
        codec_class, argument = self.resolve(name)
        return codec_class.decoder(argument, self.resources)

    def translator_to(self, name: str) -> Translator:
        """Create a translator from UTF-8 to charset ``name``."""
        codec_class, argument = self.resolve(name)
        return codec_class.encoder(argument, self.resources)

    def new_reader(self, name: str, source: BinaryIO) -> TranslatingReader:
        """Wrap ``source``, decoding charset ``name`` to UTF-8 as it is read.

        Raises:
            NotFoundError: If the charset is unknown
            BadClassError: If the charset cannot be decoded
            ResourceError: If a table cannot be loaded
        """
        translator = self.translator_from(name)
        return TranslatingReader(
            source,
            translator,
            read_size=self.config.stream.read_size,
            logger=self.logger.bind(charset=name, direction="decode"),
        )

    def new_writer(self, name: str, sink: BinaryIO) -> TranslatingWriter:
        """Wrap ``sink``, encoding UTF-8 written to it into charset ``name``.

        The writer must be closed to flush held-back input; ``sink`` is left
        open.
        """
        translator = self.translator_to(name)
        return TranslatingWriter(
            sink,
            translator,
            logger=self.logger.bind(charset=name, direction="encode"),
        )

    def register_class(
        self,
        name: str,
        decode_factory: Optional[TranslatorFactory],
        encode_factory: Optional[TranslatorFactory],
        override: bool = False,
    ) -> bool:
        """Register a codec class; see :meth:`ClassRegistry.register_class`."""
        return self.classes.register_class(name, decode_factory, encode_factory, override)

    def register_charset(
        self, descriptor: CharsetDescriptor, override: bool = False
    ) -> bool:
        """Add a charset to the catalog after the bundled catalog is loaded.

        Returns:
            True if the charset was registered
        """
        self.catalog.ensure_loaded()
        return self.catalog.register(descriptor, override)

    def register_data(self, name: str, opener: Opener) -> None:
        """Make resource ``name`` available from an in-process opener."""
        self.loader.register_data(name, opener)

    def statistics(self) -> Dict[str, Any]:
        """Summarize the catalog and resource cache state."""
        stats = self.resources.stats
        return {
            "charsets": len(self.catalog),
            "codec_classes": len(self.classes.names()),
            "cached_resources": len(self.resources),
            "cache_hits": stats.hits,
            "cache_misses": stats.misses,
            "cache_loads": stats.loads,
            "cache_failures": stats.failures,
            "catalog_diagnostics": len(self.catalog.diagnostics),
        }
