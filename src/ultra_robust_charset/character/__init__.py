"""Character conversion layer.

The Translator contract, the built-in codecs and the streaming adapters that
drive a translator over file-like objects.
"""

from .big5 import Big5Decoder
from .codepage import CodePageDecoder, CodePageEncoder
from .stream import TranslatingReader, TranslatingWriter, grow_capacity
from .translator import (
    REPLACEMENT_BYTE,
    REPLACEMENT_CHAR,
    TranslateResult,
    Translator,
    utf8_complete_length,
)
from .utf8 import UTF8Passthrough

__all__ = [
    "REPLACEMENT_BYTE",
    "REPLACEMENT_CHAR",
    "Big5Decoder",
    "CodePageDecoder",
    "CodePageEncoder",
    "TranslateResult",
    "TranslatingReader",
    "TranslatingWriter",
    "Translator",
    "UTF8Passthrough",
    "grow_capacity",
    "utf8_complete_length",
]
