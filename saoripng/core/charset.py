"""Charset transcoding between SAORI codepages and Python text.

The protocol identifies its legacy encodings by Windows codepage numbers.
Each codepage maps onto one of Python's built-in codecs, so the two
functions below are the only place bytes and text meet.
"""

from enum import Enum
from typing import Dict


class CharsetDecodeError(ValueError):
    """Raised when bytes or text cannot be converted under a codepage."""


class SaoriCharset(Enum):
    SHIFT_JIS = "Shift_JIS"
    EUC_JP = "EUC-JP"
    UTF_8 = "UTF-8"
    ISO_2022_JP = "ISO-2022-JP"

    @property
    def codepage(self) -> int:
        return _CODEPAGES[self]


_CODEPAGES: Dict[SaoriCharset, int] = {
    SaoriCharset.SHIFT_JIS: 932,
    SaoriCharset.EUC_JP: 20932,
    SaoriCharset.UTF_8: 65001,
    SaoriCharset.ISO_2022_JP: 50222,
}

# Windows codepage -> Python codec
_CODECS: Dict[int, str] = {
    932: "cp932",
    20932: "euc_jp",
    65001: "utf-8",
    50222: "iso2022_jp_ext",
}

DEFAULT_CHARSET = SaoriCharset.SHIFT_JIS

TERMINATOR = "\0"


def charset_from_name(name: str) -> SaoriCharset:
    """Look up a charset by its wire name (case-sensitive)."""
    return SaoriCharset(name)


def charset_from_codepage(codepage: int) -> SaoriCharset:
    for charset, value in _CODEPAGES.items():
        if value == codepage:
            return charset
    raise CharsetDecodeError(f"Unsupported codepage: {codepage}")


def _codec_for(codepage: int) -> str:
    try:
        return _CODECS[codepage]
    except KeyError:
        raise CharsetDecodeError(f"Unsupported codepage: {codepage}") from None


def decode(data: bytes, codepage: int) -> str:
    """
    Decode bytes in the given codepage into text.

    Only the bytes before the first NUL terminator are decoded, strictly;
    anything after it is ignored.

    Args:
        data: Raw bytes in the legacy encoding
        codepage: Windows codepage identifier (932, 20932, 65001, 50222)

    Returns:
        Decoded text, truncated at the first NUL

    Raises:
        CharsetDecodeError: If the bytes are invalid for the codepage
    """
    codec = _codec_for(codepage)
    data = bytes(data)
    end = data.find(b"\0")
    if end >= 0:
        data = data[:end]
    try:
        return data.decode(codec, errors="strict")
    except UnicodeDecodeError as e:
        raise CharsetDecodeError(
            f"Cannot decode {len(data)} bytes as codepage {codepage}: {e.reason}"
        ) from e


def encode(text: str, codepage: int) -> bytes:
    """
    Encode text into the given codepage.

    Raises:
        CharsetDecodeError: If a character has no representation in the codepage
    """
    codec = _codec_for(codepage)
    try:
        return text.encode(codec, errors="strict")
    except UnicodeEncodeError as e:
        raise CharsetDecodeError(
            f"Cannot encode text as codepage {codepage}: {e.reason} "
            f"at position {e.start}"
        ) from e
