"""UTF-8 validating passthrough.

Used for both directions of the ``utf8`` class: well-formed input comes out
unchanged, malformed sequences are replaced with U+FFFD.
"""

from typing import TYPE_CHECKING

from .translator import TranslateResult, Translator, utf8_complete_length

if TYPE_CHECKING:
    from ultra_robust_charset.catalog.resources import ResourceCache

CLASS_NAME = "utf8"


class UTF8Passthrough(Translator):
    """Validate and repair UTF-8, holding back a truncated final sequence."""

    def translate(self, data: bytes, final: bool) -> TranslateResult:
        size = len(data) if final else utf8_complete_length(data)
        chunk = bytes(data[:size])
        try:
            chunk.decode("utf-8")
        except UnicodeDecodeError:
            chunk = chunk.decode("utf-8", "replace").encode("utf-8")
        return size, chunk


def passthrough_factory(argument: str, resources: "ResourceCache") -> UTF8Passthrough:
    """Create a passthrough translator; ``argument`` is ignored."""
    return UTF8Passthrough()
