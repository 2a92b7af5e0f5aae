"""The Translator contract shared by every codec and streaming adapter.

A translator converts one stream in chunks. Each call to
:meth:`Translator.translate` consumes some prefix of the data it is given and
returns the converted bytes for that prefix; the caller re-presents the
unconsumed tail, prefixed to the next chunk, on the following call.
"""

from abc import ABC, abstractmethod
from typing import Tuple

# UTF-8 byte constants
ASCII_MAX = 0x80
UTF8_CONTINUATION_MIN = 0x80
UTF8_CONTINUATION_MAX = 0xC0
UTF8_2BYTE_MIN = 0xC2
UTF8_3BYTE_MIN = 0xE0
UTF8_4BYTE_MIN = 0xF0
UTF8_4BYTE_MAX = 0xF5

UTF8_MAX_SEQUENCE = 4

# Decoding failures become U+FFFD, encoding failures become "?"
REPLACEMENT_CHAR = "\uFFFD"
REPLACEMENT_BYTE = 0x3F

TranslateResult = Tuple[int, bytes]


class Translator(ABC):
    """Stateful converter for a single stream.

    Instances are not thread-safe and must not be shared between streams.
    """

    @abstractmethod
    def translate(self, data: bytes, final: bool) -> TranslateResult:
        """Translate a prefix of ``data``.

        Args:
            data: Next chunk of untranslated input, possibly empty
            final: True when no input will follow ``data``; all of it must
                then be consumed and any pending state flushed

        Returns:
            Tuple of (bytes consumed, converted output). The output is only
            guaranteed valid until the next call.
        """


def utf8_sequence_length(lead: int) -> int:
    """Number of bytes a UTF-8 sequence starting with ``lead`` claims.

    Bytes that can never start a sequence count as 1, so they are resolved
    (to a replacement) on their own.
    """
    if lead < UTF8_2BYTE_MIN:
        return 1
    if lead < UTF8_3BYTE_MIN:
        return 2
    if lead < UTF8_4BYTE_MIN:
        return 3
    if lead < UTF8_4BYTE_MAX:
        return 4
    return 1


def utf8_complete_length(data: bytes) -> int:
    """Length of the longest prefix of ``data`` not ending mid-sequence.

    At most ``UTF8_MAX_SEQUENCE - 1`` trailing bytes are ever excluded.
    Malformed input counts as complete; decoding it yields replacements.
    """
    end = len(data)
    for back in range(1, min(UTF8_MAX_SEQUENCE, end + 1)):
        byte = data[end - back]
        if UTF8_CONTINUATION_MIN <= byte < UTF8_CONTINUATION_MAX:
            continue
        if utf8_sequence_length(byte) > back:
            return end - back
        return end
    return end
