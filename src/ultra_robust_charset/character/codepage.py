"""Single-byte code page translators.

A code page table is a UTF-8 text resource holding exactly 256 code points,
the one at index ``i`` being the character for byte ``i``. Decoding is a
straight table lookup; encoding uses the inverse mapping and writes ``?`` for
characters the code page cannot represent.
"""

import codecs
from typing import TYPE_CHECKING, Dict

from ultra_robust_charset.shared.errors import ResourceError

from .translator import (
    REPLACEMENT_BYTE,
    TranslateResult,
    Translator,
    utf8_complete_length,
)

if TYPE_CHECKING:
    from ultra_robust_charset.catalog.resources import ResourceCache

CODE_PAGE_SIZE = 256
CLASS_NAME = "cp"


class CodePageDecoder(Translator):
    """Translate code page bytes to UTF-8. Stateless; always consumes all input."""

    def __init__(self, table: str) -> None:
        if len(table) != CODE_PAGE_SIZE:
            raise ResourceError(
                f"code page table has {len(table)} entries, expected {CODE_PAGE_SIZE}"
            )
        self.table = table

    def translate(self, data: bytes, final: bool) -> TranslateResult:
        text, _ = codecs.charmap_decode(data, "replace", self.table)
        return len(data), text.encode("utf-8")


class CodePageEncoder(Translator):
    """Translate UTF-8 to code page bytes.

    A trailing incomplete UTF-8 sequence is left unconsumed until more input
    arrives or the stream ends.
    """

    def __init__(self, mapping: Dict[int, int]) -> None:
        self.mapping = mapping

    def translate(self, data: bytes, final: bool) -> TranslateResult:
        size = len(data) if final else utf8_complete_length(data)
        text = bytes(data[:size]).decode("utf-8", "replace")
        mapping = self.mapping
        return size, bytes(mapping.get(ord(ch), REPLACEMENT_BYTE) for ch in text)


def parse_table(data: bytes, name: str = "<table>") -> str:
    """Decode a table resource, checking it holds exactly 256 entries."""
    table = data.decode("utf-8", "replace")
    if len(table) != CODE_PAGE_SIZE:
        raise ResourceError(
            f"code page {name!r} has wrong character count: {len(table)}", name
        )
    return table


def inverse_table(table: str) -> Dict[int, int]:
    """Map each code point of ``table`` back to its byte; later entries win."""
    return {ord(ch): index for index, ch in enumerate(table)}


def _load_table(argument: str, resources: "ResourceCache") -> str:
    return resources.get(
        (CLASS_NAME, "decode", argument),
        lambda: parse_table(resources.read_resource(argument), argument),
    )


def decoder_factory(argument: str, resources: "ResourceCache") -> CodePageDecoder:
    """Create a decoder for the code page table named ``argument``."""
    return CodePageDecoder(_load_table(argument, resources))


def encoder_factory(argument: str, resources: "ResourceCache") -> CodePageEncoder:
    """Create an encoder for the code page table named ``argument``."""
    table = _load_table(argument, resources)
    mapping = resources.get(
        (CLASS_NAME, "encode", argument), lambda: inverse_table(table)
    )
    return CodePageEncoder(mapping)
