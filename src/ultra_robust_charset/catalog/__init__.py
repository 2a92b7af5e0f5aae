"""Codec class registry, charset catalog and resource management."""

from .charsets import Catalog, CharsetDescriptor, normalized_name
from .context import CharsetContext
from .registry import ClassRegistry, CodecClass, CodecKind, builtin_class
from .resources import ResourceCache, ResourceLoader

__all__ = [
    "Catalog",
    "CharsetContext",
    "CharsetDescriptor",
    "ClassRegistry",
    "CodecClass",
    "CodecKind",
    "ResourceCache",
    "ResourceLoader",
    "builtin_class",
    "normalized_name",
]
