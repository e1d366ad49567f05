"""
Tests for core/charset.py - codepage transcoding.

These tests validate the decode/encode pair used for request and response
bodies, including NUL terminator handling and strict failure behaviour.
"""

import unittest

from saoripng.core.charset import (
    CharsetDecodeError,
    SaoriCharset,
    charset_from_codepage,
    charset_from_name,
    decode,
    encode,
)


class TestCharsetTables(unittest.TestCase):
    """Test cases for charset names and codepages."""

    def test_codepages(self):
        self.assertEqual(SaoriCharset.SHIFT_JIS.codepage, 932)
        self.assertEqual(SaoriCharset.EUC_JP.codepage, 20932)
        self.assertEqual(SaoriCharset.UTF_8.codepage, 65001)
        self.assertEqual(SaoriCharset.ISO_2022_JP.codepage, 50222)

    def test_lookup_by_name_is_case_sensitive(self):
        self.assertIs(charset_from_name("EUC-JP"), SaoriCharset.EUC_JP)
        with self.assertRaises(ValueError):
            charset_from_name("euc-jp")

    def test_lookup_by_codepage(self):
        self.assertIs(charset_from_codepage(50222), SaoriCharset.ISO_2022_JP)
        with self.assertRaises(CharsetDecodeError):
            charset_from_codepage(1252)


class TestTranscoding(unittest.TestCase):
    """Test cases for decode() and encode()."""

    TEXT = "EXECUTE SAORI/1.0\r\nArgument0: あいうえお仕様\r\n\r\n"

    def test_round_trip_for_every_charset(self):
        """Text encoded with a charset decodes back unchanged."""
        for charset in SaoriCharset:
            with self.subTest(charset=charset):
                data = encode(self.TEXT, charset.codepage)
                self.assertEqual(decode(data, charset.codepage), self.TEXT)

    def test_decode_matches_python_codec_for_shift_jis(self):
        data = "あいうえお仕様".encode("shift_jis")
        self.assertEqual(decode(data, 932), "あいうえお仕様")

    def test_decode_stops_at_terminator(self):
        data = "一二三\0garbage".encode("utf-8")
        self.assertEqual(decode(data, 65001), "一二三")

    def test_decode_ignores_bytes_after_terminator(self):
        """Leftover bytes after NUL are never validated."""
        self.assertEqual(decode(b"abc\0\xff\xfe", 65001), "abc")
        self.assertEqual(decode("一".encode("cp932") + b"\0\x81", 932), "一")

    def test_iso_2022_jp_half_width_katakana(self):
        data = encode("ｱｲｳ仕様", 50222)
        self.assertIn(b"\x1b(I", data)
        self.assertEqual(decode(data, 50222), "ｱｲｳ仕様")

    def test_decode_keeps_text_without_terminator(self):
        self.assertEqual(decode(b"plain", 932), "plain")

    def test_decode_empty_bytes(self):
        self.assertEqual(decode(b"", 65001), "")

    def test_encode_keeps_terminator(self):
        self.assertEqual(encode("ok\0", 65001), b"ok\x00")

    def test_decode_invalid_bytes_raises(self):
        with self.assertRaises(CharsetDecodeError):
            decode(b"\xff\xfe\xfd", 65001)

    def test_decode_incomplete_multibyte_raises(self):
        with self.assertRaises(CharsetDecodeError):
            decode("仕".encode("euc_jp")[:1], 20932)

    def test_encode_unrepresentable_text_raises(self):
        """No replacement characters: emoji are not in Shift_JIS."""
        with self.assertRaises(CharsetDecodeError):
            encode("result 😀", 932)

    def test_unknown_codepage_raises(self):
        with self.assertRaises(CharsetDecodeError):
            decode(b"abc", 437)
        with self.assertRaises(CharsetDecodeError):
            encode("abc", 437)


if __name__ == "__main__":
    unittest.main()
