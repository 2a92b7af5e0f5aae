"""Tests for the module-level conversion API."""

import io
import threading

import pytest

import ultra_robust_charset
from ultra_robust_charset.api import convert
from ultra_robust_charset.catalog.charsets import CharsetDescriptor
from ultra_robust_charset.catalog.context import CharsetContext
from ultra_robust_charset.shared.errors import DirectionError, NotFoundError


@pytest.fixture
def fresh_default(monkeypatch):
    """Replace the process default context for the duration of a test."""
    monkeypatch.setattr(convert, "_default_context", None)


class TestDefaultContext:
    """Test the lazily created process-wide context."""

    def test_created_once(self, fresh_default):
        """Test that repeated calls return the same context."""
        first = convert.default_context()

        assert isinstance(first, CharsetContext)
        assert convert.default_context() is first

    def test_concurrent_creation(self, fresh_default):
        """Test that concurrent first calls agree on one context."""
        barrier = threading.Barrier(6)
        seen = []

        def worker():
            barrier.wait()
            seen.append(convert.default_context())

        threads = [threading.Thread(target=worker) for _ in range(6)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(seen) == 6
        assert all(context is seen[0] for context in seen)


class TestConversionFunctions:
    """Test one-shot and streaming conversion functions."""

    def test_decode(self):
        """Test decoding bytes to text."""
        assert ultra_robust_charset.decode(b"caf\xe9", "latin1") == "café"
        assert ultra_robust_charset.decode(b"\x93hi\x94", "cp1252") == "\u201chi\u201d"

    def test_encode(self):
        """Test encoding text to bytes with '?' for unmappable characters."""
        assert ultra_robust_charset.encode("café", "latin1") == b"caf\xe9"
        assert ultra_robust_charset.encode("€ and 中", "windows-1252") == b"\x80 and ?"

    def test_decode_repairs_invalid_utf8(self):
        """Test that invalid UTF-8 input decodes with replacements."""
        assert ultra_robust_charset.decode(b"ok\xff", "utf8") == "ok\ufffd"

    def test_streaming_functions(self):
        """Test new_reader and new_writer against in-memory streams."""
        reader = ultra_robust_charset.new_reader("latin1", io.BytesIO(b"\xe0 la"))
        sink = io.BytesIO()
        writer = ultra_robust_charset.new_writer("cp437", sink)

        writer.write(reader.read())
        writer.close()

        assert sink.getvalue() == b"\x85 la"

    def test_info_and_names(self):
        """Test catalog queries through the default context."""
        assert ultra_robust_charset.info("CP819").name == "latin1"
        assert ultra_robust_charset.info("nope") is None
        assert "big5" in ultra_robust_charset.names()

    def test_errors(self):
        """Test that unknown names and missing directions raise."""
        with pytest.raises(NotFoundError):
            ultra_robust_charset.decode(b"x", "no-such-charset")

        with pytest.raises(DirectionError):
            ultra_robust_charset.encode("x", "big5")

    def test_explicit_context(self):
        """Test that a passed context is used instead of the default."""
        context = CharsetContext()
        context.register_charset(CharsetDescriptor("scratch", "utf8"))

        assert convert.decode(b"abc", "scratch", context) == "abc"
        assert convert.info("scratch", context) is not None
        assert "scratch" in convert.names(context)
        with pytest.raises(NotFoundError):
            convert.decode(b"abc", "scratch")
