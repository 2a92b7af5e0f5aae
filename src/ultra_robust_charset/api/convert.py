"""Module-level conversion API.

These functions use a process-wide :class:`CharsetContext`, created on first
use, unless a context is passed explicitly.

Examples:
    Streaming decode:
    >>> reader = new_reader("latin1", open("legacy.txt", "rb"))
    >>> text = reader.read().decode("utf-8")

    One-shot conversion:
    >>> decode(b"caf\\xe9", "latin1") == "caf\\u00e9"
    True
    >>> encode("caf\\xe9", "latin1")
    b'caf\\xe9'
"""

import io
import threading
from typing import BinaryIO, List, Optional

from ultra_robust_charset.catalog.charsets import CharsetDescriptor
from ultra_robust_charset.catalog.context import CharsetContext
from ultra_robust_charset.character.stream import TranslatingReader, TranslatingWriter

_default_context: Optional[CharsetContext] = None
_default_lock = threading.Lock()


def default_context() -> CharsetContext:
    """Return the process-wide context, creating it on first call."""
    global _default_context
    if _default_context is None:
        with _default_lock:
            if _default_context is None:
                _default_context = CharsetContext()
    return _default_context


def new_reader(
    charset: str, source: BinaryIO, context: Optional[CharsetContext] = None
) -> TranslatingReader:
    """Return a stream that reads ``source`` as ``charset`` and yields UTF-8.

    Raises:
        NotFoundError: If the charset is unknown
        BadClassError: If the charset cannot be decoded
        ResourceError: If the charset's table cannot be loaded
    """
    return (context or default_context()).new_reader(charset, source)


def new_writer(
    charset: str, sink: BinaryIO, context: Optional[CharsetContext] = None
) -> TranslatingWriter:
    """Return a stream that accepts UTF-8 and writes ``charset`` to ``sink``.

    Close the returned writer to flush; ``sink`` stays open.
    """
    return (context or default_context()).new_writer(charset, sink)


def info(name: str, context: Optional[CharsetContext] = None) -> Optional[CharsetDescriptor]:
    """Return the catalog entry for a charset name or alias, or None."""
    return (context or default_context()).info(name)


def names(context: Optional[CharsetContext] = None) -> List[str]:
    """Return the canonical names of all known charsets, sorted."""
    return (context or default_context()).names()


def decode(
    data: bytes, charset: str, context: Optional[CharsetContext] = None
) -> str:
    """Decode a complete byte string in ``charset`` to text."""
    reader = new_reader(charset, io.BytesIO(data), context)
    return reader.readall().decode("utf-8")


def encode(
    text: str, charset: str, context: Optional[CharsetContext] = None
) -> bytes:
    """Encode text into ``charset``; unrepresentable characters become ``?``."""
    sink = io.BytesIO()
    writer = new_writer(charset, sink, context)
    writer.write(text.encode("utf-8"))
    writer.close()
    return sink.getvalue()
