"""Binding to Python's codec registry.

Every text codec known to the interpreter can back a charset through the
``pycodec`` class. Translation goes through the codec's incremental decoder
and encoder, so partial multi-byte sequences are held inside the codec state
and every call consumes all of its input.
"""

import codecs
import re
from collections import defaultdict
from encodings.aliases import aliases as _CODEC_ALIASES
from typing import TYPE_CHECKING, Dict, List

from ultra_robust_charset.catalog.charsets import CharsetDescriptor
from ultra_robust_charset.character.translator import (
    REPLACEMENT_CHAR,
    TranslateResult,
    Translator,
)
from ultra_robust_charset.shared.errors import ResourceError
from ultra_robust_charset.shared.logging import get_logger

if TYPE_CHECKING:
    from ultra_robust_charset.catalog.context import CharsetContext
    from ultra_robust_charset.catalog.resources import ResourceCache

CLASS_NAME = "pycodec"

logger = get_logger(__name__, component="pycodecs")

# utf_7 "+2AA-" and similar inputs decode to lone surrogates UTF-8 cannot hold
_LONE_SURROGATE = re.compile("[\ud800-\udfff]")


class CodecTranslator(Translator):
    """Chain an incremental decoder into an incremental encoder.

    Lone surrogates produced by the decoder are replaced with U+FFFD before
    encoding.
    """

    def __init__(
        self,
        decoder: codecs.IncrementalDecoder,
        encoder: codecs.IncrementalEncoder,
    ) -> None:
        self.decoder = decoder
        self.encoder = encoder

    def translate(self, data: bytes, final: bool) -> TranslateResult:
        text = self.decoder.decode(bytes(data), final)
        text = _LONE_SURROGATE.sub(REPLACEMENT_CHAR, text)
        return len(data), self.encoder.encode(text, final)


def _is_text_codec(name: str) -> bool:
    try:
        info = codecs.lookup(name)
    except LookupError:
        return False
    # bytes-to-bytes and str-to-str codecs (base64, rot13, ...) opt out here
    return getattr(info, "_is_text_encoding", True)


def codec_names() -> Dict[str, List[str]]:
    """Map each text codec with registered aliases to its sorted alias list.

    Codecs unavailable on this platform are left out.
    """
    grouped: Dict[str, List[str]] = defaultdict(list)
    for alias, codec in _CODEC_ALIASES.items():
        grouped[codec].append(alias)
    return {
        codec: sorted(names)
        for codec, names in sorted(grouped.items())
        if _is_text_codec(codec)
    }


def _incremental(kind: str, codec: str, errors: str):
    getter = (
        codecs.getincrementaldecoder if kind == "decode" else codecs.getincrementalencoder
    )
    try:
        return getter(codec)(errors)
    except LookupError as e:
        raise ResourceError(f"Python has no incremental codec {codec!r}", codec) from e


def decoder_factory(argument: str, resources: "ResourceCache") -> CodecTranslator:
    """Create a translator from the Python codec ``argument`` to UTF-8."""
    return CodecTranslator(
        _incremental("decode", argument, "replace"),
        _incremental("encode", "utf-8", "strict"),
    )


def encoder_factory(argument: str, resources: "ResourceCache") -> CodecTranslator:
    """Create a translator from UTF-8 to the Python codec ``argument``.

    Characters the codec cannot represent become ``?``.
    """
    return CodecTranslator(
        _incremental("decode", "utf-8", "replace"),
        _incremental("encode", argument, "replace"),
    )


def register_python_codecs(context: "CharsetContext", override: bool = False) -> int:
    """Register the ``pycodec`` class and one charset per Python text codec.

    Names already in the context's catalog are kept unless ``override`` is
    set, so bundled tables win by default.

    Returns:
        Number of charsets registered
    """
    context.register_class(CLASS_NAME, decoder_factory, encoder_factory, override)
    registered = 0
    for codec, alias_list in codec_names().items():
        descriptor = CharsetDescriptor(
            name=codec,
            class_name=CLASS_NAME,
            argument=codec,
            aliases=alias_list,
            description=f"Python codec {codec}",
        )
        if context.register_charset(descriptor, override):
            registered += 1
    logger.debug(
        "Python codecs registered",
        extra={"registered": registered, "override": override},
    )
    return registered
