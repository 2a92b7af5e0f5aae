"""Bindings to external codec libraries."""

from .pycodecs import CodecTranslator, codec_names, register_python_codecs

__all__ = ["CodecTranslator", "codec_names", "register_python_codecs"]
