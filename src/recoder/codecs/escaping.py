#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/recoder/codecs/escaping.py
"""Percent, underscore and binary-to-text escaping codecs.

This module covers the transport encodings of the catalog: URI percent
escaping, HTML form encoding, the underscore escaping used for variable
and file names, base64 and SHA-1 digests.

"""

from __future__ import annotations

import base64
import binascii
import hashlib
import re
from functools import lru_cache
from urllib.parse import quote_plus, unquote_plus

from recoder.codecs._base import char_codec, text_codec
from recoder.constants import (
    FILENAME_REPLACEMENT,
    FILENAME_SAFE_BYTES,
    URI_ALNUM,
    URI_CHAR_CODES,
    URI_RESERVED,
    FormatTag,
)
from recoder.exceptions import RecodingError
from recoder.metadata import CodecMetadata

_URI_ESCAPE = re.compile(r"%(?:([0-9A-Fa-f]{2})|\{([0-9A-Fa-f]{1,6})\})")
_UNDERSCORE_ESCAPE = re.compile(r"_([0-9A-Fa-f]{2})")


@lru_cache(maxsize=1024)
def escape_uri_char(char: str) -> str:
    """Percent-escape one character for use in a URI.

    Alphanumerics and RFC 2396 marks are kept. Reserved, unsafe and control
    characters as well as the rest of Latin-1 become ``%XX``; characters
    beyond U+00FF become ``%{XXXX}``.

    Parameters
    ----------
    char : str
        A single character

    Returns
    -------
    str
        The escaped form

    Examples
    --------
        >>> escape_uri_char("/")
        '%2F'
        >>> escape_uri_char("€")
        '%{20AC}'

    """
    code = ord(char)
    if code > 0xFFFF:
        return f"%{{{code:06X}}}"
    if code > 0xFF:
        return f"%{{{code:04X}}}"
    if code > 0x7F or URI_CHAR_CODES[code] >= URI_RESERVED:
        return f"%{code:02X}"
    return char


def _decode_uri_escape(match: re.Match[str]) -> str:
    return chr(int(match.group(1) or match.group(2), 16))


def unescape_uri(text: str) -> str:
    """Decode ``%XX`` and ``%{XXXX}`` escapes.

    Malformed escapes are left as they are.

    Raises
    ------
    RecodingError
        If a braced escape names a value beyond the Unicode range

    """
    try:
        return _URI_ESCAPE.sub(_decode_uri_escape, text)
    except ValueError as e:
        raise RecodingError(
            f"Invalid percent escape: {e}", source_tag="URI", target_tag="UTF8", original_error=e
        ) from e


def encode_form(text: str) -> str:
    """Encode text as ``application/x-www-form-urlencoded``."""
    return quote_plus(text, safe="*")


def decode_form(text: str) -> str:
    """Decode ``application/x-www-form-urlencoded`` text."""
    try:
        return unquote_plus(text, errors="strict")
    except UnicodeDecodeError as e:
        raise RecodingError(
            "Form encoded text is not valid UTF-8", source_tag="URIFORM", target_tag="UTF8", original_error=e
        ) from e


def _escape_underscore(text: str, keep_underscore: bool) -> str:
    parts = []
    for position, byte in enumerate(text.encode("utf-8")):
        keep = byte < 0x80 and URI_CHAR_CODES[byte] == URI_ALNUM
        if keep_underscore and byte == 0x5F:
            keep = True
        if position == 0 and 0x30 <= byte <= 0x39:
            keep = False
        parts.append(chr(byte) if keep else f"_{byte:02X}")
    return "".join(parts)


def escape_vsa(text: str) -> str:
    """Escape text into a valid variable name.

    Works on the UTF-8 bytes: everything except ASCII letters and digits
    becomes ``_XX``, and a leading digit is always escaped.

    Examples
    --------
        >>> escape_vsa("1 a.b")
        '_31_20a_2Eb'

    """
    return _escape_underscore(text, keep_underscore=False)


def escape_vsau(text: str) -> str:
    """Escape text like :func:`escape_vsa` but keep underscores."""
    return _escape_underscore(text, keep_underscore=True)


def unescape_vsa(text: str) -> str:
    """Decode ``_XX`` escapes back to UTF-8 text.

    Raises
    ------
    RecodingError
        If the decoded bytes are not valid UTF-8

    """
    raw = bytearray()
    position = 0
    for match in _UNDERSCORE_ESCAPE.finditer(text):
        raw += text[position : match.start()].encode("utf-8")
        raw.append(int(match.group(1), 16))
        position = match.end()
    raw += text[position:].encode("utf-8")
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as e:
        raise RecodingError(
            "Underscore escapes do not decode to UTF-8", source_tag="VSA", target_tag="UTF8", original_error=e
        ) from e


def escape_filename_char(char: str) -> str:
    """Replace each unsafe UTF-8 byte of ``char`` with an underscore."""
    return "".join(chr(byte) if byte in FILENAME_SAFE_BYTES else FILENAME_REPLACEMENT for byte in char.encode("utf-8"))


def sha1_hex(text: str) -> str:
    """Return the uppercase hex SHA-1 digest of the UTF-8 encoded text."""
    return hashlib.sha1(text.encode("utf-8")).hexdigest().upper()


def encode_base64(text: str) -> str:
    """Encode the UTF-8 bytes of ``text`` as base64."""
    return base64.b64encode(text.encode("utf-8")).decode("ascii")


def decode_base64(text: str) -> str:
    """Decode base64 text to UTF-8, ignoring embedded whitespace.

    Raises
    ------
    RecodingError
        If the text is not valid base64 or does not decode to UTF-8

    """
    try:
        return base64.b64decode("".join(text.split()), validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError) as e:
        raise RecodingError(
            f"Invalid base64 input: {e}", source_tag="BASE64", target_tag="UTF8", original_error=e
        ) from e


ESCAPING_CODECS: list[CodecMetadata] = [
    CodecMetadata(
        source=FormatTag.URI,
        target=FormatTag.UTF8,
        func=text_codec(unescape_uri),
        description="Decode %XX and %{XXXX} percent escapes",
        stream_safe=False,
        category="escaping",
    ),
    CodecMetadata(
        source=FormatTag.UTF8,
        target=FormatTag.URI,
        func=char_codec(escape_uri_char),
        description="Percent-escape reserved, unsafe and non-ASCII characters",
        category="escaping",
    ),
    CodecMetadata(
        source=FormatTag.URIFORM,
        target=FormatTag.UTF8,
        func=text_codec(decode_form),
        description="Decode HTML form encoding",
        stream_safe=False,
        category="escaping",
    ),
    CodecMetadata(
        source=FormatTag.UTF8,
        target=FormatTag.URIFORM,
        func=char_codec(encode_form),
        description="HTML form encoding ('+' for space)",
        category="escaping",
    ),
    CodecMetadata(
        source=FormatTag.VSA,
        target=FormatTag.UTF8,
        func=text_codec(unescape_vsa),
        description="Decode _XX variable name escapes",
        stream_safe=False,
        category="escaping",
    ),
    CodecMetadata(
        source=FormatTag.VSAU,
        target=FormatTag.UTF8,
        func=text_codec(unescape_vsa),
        description="Decode _XX variable name escapes",
        stream_safe=False,
        category="escaping",
    ),
    CodecMetadata(
        source=FormatTag.UTF8,
        target=FormatTag.VSA,
        func=text_codec(escape_vsa),
        description="Escape into a variable name, non-alphanumeric bytes as _XX",
        stream_safe=False,
        category="escaping",
    ),
    CodecMetadata(
        source=FormatTag.UTF8,
        target=FormatTag.VSAU,
        func=text_codec(escape_vsau),
        description="Escape into a variable name keeping underscores",
        stream_safe=False,
        category="escaping",
    ),
    CodecMetadata(
        source=FormatTag.UTF8,
        target=FormatTag.FILENAME,
        func=char_codec(escape_filename_char),
        description="Replace bytes unsafe in file names with '_'",
        category="escaping",
    ),
    CodecMetadata(
        source=FormatTag.UTF8,
        target=FormatTag.SHA1,
        func=text_codec(sha1_hex),
        description="Uppercase hex SHA-1 digest of the UTF-8 bytes",
        stream_safe=False,
        category="escaping",
    ),
    CodecMetadata(
        source=FormatTag.BASE64,
        target=FormatTag.UTF8,
        func=text_codec(decode_base64),
        description="Decode base64 to UTF-8 text",
        stream_safe=False,
        category="escaping",
    ),
    CodecMetadata(
        source=FormatTag.UTF8,
        target=FormatTag.BASE64,
        func=text_codec(encode_base64),
        description="Encode the UTF-8 bytes as base64",
        stream_safe=False,
        category="escaping",
    ),
]

__all__ = [
    "escape_uri_char",
    "unescape_uri",
    "encode_form",
    "decode_form",
    "escape_vsa",
    "escape_vsau",
    "unescape_vsa",
    "escape_filename_char",
    "sha1_hex",
    "encode_base64",
    "decode_base64",
    "ESCAPING_CODECS",
]
