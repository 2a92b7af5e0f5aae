"""Tests for single-byte code page translators."""

import pytest

from ultra_robust_charset.catalog.resources import ResourceCache, ResourceLoader
from ultra_robust_charset.character.codepage import (
    CODE_PAGE_SIZE,
    CodePageDecoder,
    CodePageEncoder,
    decoder_factory,
    encoder_factory,
    inverse_table,
    parse_table,
)
from ultra_robust_charset.shared.errors import ResourceError

IDENTITY_TABLE = "".join(chr(i) for i in range(CODE_PAGE_SIZE))


class TestCodePageDecoder:
    """Test decoding code page bytes to UTF-8."""

    def test_identity_table_scenario(self):
        """Test that 0x41 0x42 decode to "AB" with an identity table."""
        decoder = CodePageDecoder(IDENTITY_TABLE)

        consumed, output = decoder.translate(bytes([0x41, 0x42]), False)

        assert consumed == 2
        assert output.decode("utf-8") == "AB"

    def test_non_ascii_mapping(self):
        """Test that high bytes decode through the table to multi-byte UTF-8."""
        table = IDENTITY_TABLE[:0xE9] + "é" + IDENTITY_TABLE[0xEA:]
        table = table[:0x80] + "€" + table[0x81:]
        decoder = CodePageDecoder(table)

        consumed, output = decoder.translate(b"caf\xe9 \x80", True)

        assert consumed == 6
        assert output == "café €".encode("utf-8")

    def test_empty_input(self):
        """Test that empty input produces empty output."""
        decoder = CodePageDecoder(IDENTITY_TABLE)

        assert decoder.translate(b"", True) == (0, b"")

    def test_wrong_table_size(self):
        """Test that tables without 256 entries are rejected."""
        with pytest.raises(ResourceError, match="expected 256"):
            CodePageDecoder("abc")


class TestCodePageEncoder:
    """Test encoding UTF-8 to code page bytes."""

    def test_identity_table_scenario(self):
        """Test that "AB" encodes to 0x41 0x42 with an identity table."""
        encoder = CodePageEncoder(inverse_table(IDENTITY_TABLE))

        consumed, output = encoder.translate(b"AB", False)

        assert consumed == 2
        assert output == bytes([0x41, 0x42])

    def test_unrepresentable_character_becomes_question_mark(self):
        """Test that characters outside the code page encode as '?'."""
        encoder = CodePageEncoder(inverse_table(IDENTITY_TABLE))

        _, output = encoder.translate("a中b".encode("utf-8"), True)

        assert output == b"a?b"

    def test_split_sequence_held_back(self):
        """Test that an incomplete UTF-8 sequence is left unconsumed."""
        encoder = CodePageEncoder(inverse_table(IDENTITY_TABLE))
        data = "xé".encode("utf-8")

        consumed, output = encoder.translate(data[:2], False)
        assert (consumed, output) == (1, b"x")

        consumed, output = encoder.translate(data[1:], False)
        assert (consumed, output) == (2, b"\xe9")

    def test_truncated_sequence_at_end_replaced(self):
        """Test that a truncated sequence at end of input is consumed as '?'."""
        encoder = CodePageEncoder(inverse_table(IDENTITY_TABLE))

        consumed, output = encoder.translate(b"a\xc3", True)

        assert consumed == 2
        assert output == b"a?"


class TestCodePageTables:
    """Test table parsing and the cached factories."""

    def test_parse_table_checks_count(self):
        """Test that a resource with the wrong character count is rejected."""
        with pytest.raises(ResourceError, match="wrong character count"):
            parse_table("short".encode("utf-8"), "short.cp")

    def test_inverse_table(self):
        """Test that the inverse maps code points back to bytes."""
        mapping = inverse_table(IDENTITY_TABLE)

        assert mapping[ord("A")] == 0x41
        assert len(mapping) == CODE_PAGE_SIZE

    def test_bundled_tables_round_trip(self):
        """Test every bundled code page maps all 256 bytes to distinct characters."""
        resources = ResourceCache(ResourceLoader())

        for argument in ("latin1.cp", "cp437.cp", "windows-1252.cp"):
            decoder = decoder_factory(argument, resources)
            encoder = encoder_factory(argument, resources)
            _, text = decoder.translate(bytes(range(256)), True)
            _, raw = encoder.translate(text, True)
            assert raw == bytes(range(256)), argument

    def test_decoder_and_encoder_share_one_read(self):
        """Test that both directions load the table resource only once."""
        loader = ResourceLoader()
        reads = []
        original_read = loader.read

        def counting_read(name):
            reads.append(name)
            return original_read(name)

        loader.read = counting_read
        resources = ResourceCache(loader)

        decoder_factory("latin1.cp", resources)
        encoder_factory("latin1.cp", resources)
        encoder_factory("latin1.cp", resources)

        assert reads == ["latin1.cp"]
        assert ("cp", "decode", "latin1.cp") in resources
        assert ("cp", "encode", "latin1.cp") in resources

    def test_latin1_table_contents(self):
        """Test a few known latin1 mappings."""
        decoder = decoder_factory("latin1.cp", ResourceCache(ResourceLoader()))

        _, output = decoder.translate(b"\x41\xe9\xff", True)

        assert output.decode("utf-8") == "Aéÿ"

    def test_windows_1252_euro_sign(self):
        """Test that 0x80 is the euro sign in windows-1252."""
        decoder = decoder_factory("windows-1252.cp", ResourceCache(ResourceLoader()))

        _, output = decoder.translate(b"\x80", True)

        assert output.decode("utf-8") == "€"
