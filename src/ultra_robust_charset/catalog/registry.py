"""Codec class registry.

A codec class is a family of translators parameterized by an argument taken
from the catalog, usually the name of a table resource. The built-in classes
form the closed :class:`CodecKind` set; other providers, such as the Python
codec binding, add classes through :meth:`ClassRegistry.register_class`.
"""

import threading
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Callable, Dict, List, Optional

from ultra_robust_charset.character import big5, codepage, utf8
from ultra_robust_charset.character.translator import Translator
from ultra_robust_charset.shared.errors import BadClassError, DirectionError
from ultra_robust_charset.shared.logging import get_logger

if TYPE_CHECKING:
    from .resources import ResourceCache

TranslatorFactory = Callable[[str, "ResourceCache"], Translator]


class CodecKind(Enum):
    """Built-in codec classes, valued by their catalog class name."""

    CODE_PAGE = codepage.CLASS_NAME
    BIG5 = big5.CLASS_NAME
    UTF8 = utf8.CLASS_NAME


@dataclass(frozen=True)
class CodecClass:
    """A named pair of translator factories.

    Attributes:
        name: Class name referenced by catalog entries
        decode_factory: Creates translators from the charset to UTF-8
        encode_factory: Creates translators from UTF-8 to the charset, or
            None for a decode-only class
    """

    name: str
    decode_factory: Optional[TranslatorFactory]
    encode_factory: Optional[TranslatorFactory]

    def decoder(self, argument: str, resources: "ResourceCache") -> Translator:
        """Instantiate a translator from the charset to UTF-8."""
        if self.decode_factory is None:
            raise DirectionError(self.name, "decode")
        return self.decode_factory(argument, resources)

    def encoder(self, argument: str, resources: "ResourceCache") -> Translator:
        """Instantiate a translator from UTF-8 to the charset."""
        if self.encode_factory is None:
            raise DirectionError(self.name, "encode")
        return self.encode_factory(argument, resources)


_BUILTIN_CLASSES: Dict[CodecKind, CodecClass] = {
    CodecKind.CODE_PAGE: CodecClass(
        CodecKind.CODE_PAGE.value, codepage.decoder_factory, codepage.encoder_factory
    ),
    CodecKind.BIG5: CodecClass(CodecKind.BIG5.value, big5.decoder_factory, None),
    CodecKind.UTF8: CodecClass(
        CodecKind.UTF8.value, utf8.passthrough_factory, utf8.passthrough_factory
    ),
}


def builtin_class(kind: CodecKind) -> CodecClass:
    """Return the codec class implementing a built-in kind."""
    return _BUILTIN_CLASSES[kind]


class ClassRegistry:
    """Mapping from class name to :class:`CodecClass`.

    Registration is additive: the first class registered under a name is
    kept unless a later registration passes ``override=True``.
    """

    def __init__(self, correlation_id: Optional[str] = None) -> None:
        self._classes: Dict[str, CodecClass] = {}
        self._lock = threading.Lock()
        self.logger = get_logger(__name__, correlation_id, "class_registry")

    @classmethod
    def with_builtins(cls, correlation_id: Optional[str] = None) -> "ClassRegistry":
        """Create a registry holding every built-in :class:`CodecKind`."""
        registry = cls(correlation_id)
        for kind in CodecKind:
            registry.add(builtin_class(kind))
        return registry

    def register_class(
        self,
        name: str,
        decode_factory: Optional[TranslatorFactory],
        encode_factory: Optional[TranslatorFactory],
        override: bool = False,
    ) -> bool:
        """Register a codec class under ``name``.

        Returns:
            True if the class was stored, False if an existing class was kept
        """
        if not name:
            raise ValueError("codec class name cannot be empty")
        if decode_factory is None and encode_factory is None:
            raise ValueError(f"codec class {name!r} needs at least one factory")
        return self.add(CodecClass(name, decode_factory, encode_factory), override)

    def add(self, codec_class: CodecClass, override: bool = False) -> bool:
        """Register an already-built :class:`CodecClass`."""
        with self._lock:
            if codec_class.name in self._classes and not override:
                self.logger.debug(
                    "Codec class already registered; keeping existing",
                    extra={"class_name": codec_class.name},
                )
                return False
            self._classes[codec_class.name] = codec_class
            return True

    def get(self, name: str) -> CodecClass:
        """Return the class registered under ``name``.

        Raises:
            BadClassError: If no such class is registered
        """
        try:
            return self._classes[name]
        except KeyError:
            raise BadClassError(name) from None

    def __contains__(self, name: object) -> bool:
        return name in self._classes

    def names(self) -> List[str]:
        """Return the registered class names, sorted."""
        return sorted(self._classes)
