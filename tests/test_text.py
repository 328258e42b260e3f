"""Tests for plain-text decoding and normalization."""

import pytest

from app.summarizer.extraction import EmptyContentError, extract_txt, looks_like_text
from app.summarizer.extraction.text import clean, decode, has_bom, is_utf8


class TestExtractTxt:
    """Tests for extract_txt()."""

    def test_utf8_bom_is_stripped(self):
        """Test the UTF-8 byte-order mark is removed."""
        assert extract_txt(bytes([0xEF, 0xBB, 0xBF]) + b"hi") == "hi"

    def test_empty_input_raises(self):
        with pytest.raises(EmptyContentError):
            extract_txt(b"")

    def test_whitespace_only_raises(self):
        with pytest.raises(EmptyContentError):
            extract_txt(b"  \r\n\t\n\x00 \n")

    def test_text_is_cleaned(self):
        data = b"  Dear Jane,\r\n\r\n  Please find the invoice attached.  \rRegards\n"
        assert extract_txt(data) == (
            "Dear Jane,\nPlease find the invoice attached.\nRegards"
        )

    def test_idempotent(self):
        data = "Café menu\n\nsoup".encode("utf-8")
        assert extract_txt(data) == extract_txt(data)


class TestDecode:
    """Tests for decode()."""

    def test_plain_utf8(self):
        assert decode("naïve résumé ½".encode("utf-8")) == "naïve résumé ½"

    def test_utf16_le_bom(self):
        data = b"\xff\xfe" + "Hello ü".encode("utf-16-le")
        assert decode(data) == "Hello ü"

    def test_utf16_be_bom(self):
        data = b"\xfe\xff" + "Hello ü".encode("utf-16-be")
        assert decode(data) == "Hello ü"

    def test_windows_1252_fallback(self):
        """Test bytes invalid as UTF-8 decode as Windows-1252."""
        data = "“Quoted” €5".encode("cp1252")
        assert decode(data) == "“Quoted” €5"

    def test_latin1_fallback_for_undefined_cp1252_bytes(self):
        """Test bytes undefined in Windows-1252 still decode via Latin-1."""
        data = b"caf\xe9 \x81"
        assert decode(data) == "café \x81"

    def test_never_raises_on_arbitrary_bytes(self):
        assert isinstance(decode(bytes(range(256))), str)


class TestClean:
    """Tests for clean()."""

    def test_normalizes_line_endings(self):
        assert clean("a\r\nb\rc\nd") == "a\nb\nc\nd"

    def test_strips_nul_characters(self):
        assert clean("h\x00e\x00llo") == "hello"

    def test_drops_blank_lines_and_trims(self):
        assert clean("\n\n   first  \n\t\n  second\n\n") == "first\nsecond"

    def test_preserves_inner_spacing(self):
        assert clean("a  b\tc") == "a  b\tc"


class TestLooksLikeText:
    """Tests for looks_like_text()."""

    def test_ascii_text_accepted(self):
        assert looks_like_text(b"Hello world\nSecond line\r\n\tIndented") is True

    def test_mostly_null_bytes_rejected(self):
        """Test a 600-byte buffer of 90% NUL bytes is rejected."""
        data = b"\x00" * 540 + b"a" * 60
        assert len(data) == 600
        assert looks_like_text(data) is False

    def test_only_first_512_bytes_sampled(self):
        data = b"a" * 512 + b"\x00" * 2000
        assert looks_like_text(data) is True

    def test_threshold_is_80_percent(self):
        assert looks_like_text(b"a" * 80 + b"\x00" * 20) is True
        assert looks_like_text(b"a" * 79 + b"\x00" * 21) is False

    def test_empty_rejected(self):
        assert looks_like_text(b"") is False


class TestHasBom:
    """Tests for has_bom()."""

    @pytest.mark.parametrize(
        "data", [b"\xef\xbb\xbfx", b"\xff\xfex\x00", b"\xfe\xff\x00x"]
    )
    def test_detects_boms(self, data: bytes):
        assert has_bom(data) is True

    def test_no_bom(self):
        assert has_bom(b"plain") is False


class TestIsUtf8:
    """Tests for is_utf8()."""

    def test_non_ascii_utf8(self):
        assert is_utf8("Ελληνικά και 日本語".encode("utf-8")) is True

    def test_cp1252_bytes(self):
        assert is_utf8("“quoted”".encode("cp1252")) is False
