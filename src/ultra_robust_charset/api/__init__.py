"""Public conversion entry points."""

from .convert import decode, default_context, encode, info, names, new_reader, new_writer

__all__ = [
    "decode",
    "default_context",
    "encode",
    "info",
    "names",
    "new_reader",
    "new_writer",
]
