"""Ultra-Robust Charset.

Streaming conversion between legacy byte-oriented character sets and UTF-8.
Input is translated chunk by chunk, so documents of any size can be converted
without being held in memory, and undecodable input is repaired rather than
rejected.

Progressive API Disclosure:
- Level 1: Simple functions - decode(), encode(), new_reader(), new_writer()
- Level 2: Explicit contexts - CharsetContext with its own configuration
- Level 3: Custom codecs - Translator subclasses and register_class()
"""

__version__ = "0.1.0"
__author__ = "Ultra Robust Charset Team"

# Progressive API disclosure - Level 1: Simple functions
from .api import decode, default_context, encode, info, names, new_reader, new_writer

# Progressive API disclosure - Level 2: Explicit contexts
from .catalog import CharsetContext, CharsetDescriptor

# Progressive API disclosure - Level 3: Custom codecs
from .character import TranslatingReader, TranslatingWriter, Translator

# Configuration and errors
from .shared.config import CharsetConfig, ResourceConfig, StreamConfig
from .shared.errors import (
    BadClassError,
    CharsetError,
    DirectionError,
    NotFoundError,
    ResourceError,
    ShortWriteError,
)

__all__ = [
    # Version and metadata
    "__author__",
    "__version__",

    # Level 1: Simple conversion functions
    "decode",
    "encode",
    "new_reader",
    "new_writer",
    "info",
    "names",
    "default_context",

    # Level 2: Explicit contexts
    "CharsetContext",
    "CharsetDescriptor",

    # Level 3: Custom codecs and streams
    "Translator",
    "TranslatingReader",
    "TranslatingWriter",

    # Configuration classes
    "CharsetConfig",
    "ResourceConfig",
    "StreamConfig",

    # Errors
    "CharsetError",
    "NotFoundError",
    "BadClassError",
    "DirectionError",
    "ResourceError",
    "ShortWriteError",
]
