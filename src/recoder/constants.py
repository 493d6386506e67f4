#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/recoder/constants.py
"""Constants and default values for the recoder library.

This module centralizes the format tag enumeration, the pipeline recipe
syntax characters and the default values used by the built-in codecs.

Constants are organized by category:
1. Format Tags - The closed enumeration of textual representations
2. Recipe Syntax - Characters of the pipeline recipe language
3. Codec Defaults - Default option values of the built-in codecs
4. Character Tables - Classification tables shared by escaping codecs
"""

from __future__ import annotations

from enum import Enum
from typing import Literal

# =============================================================================
# Format Tags
# =============================================================================


class FormatTag(str, Enum):
    """Named textual representations a text value can be recoded between.

    Tags are compared by identity. Two equal adjacent tags in a pipeline
    denote an explicit identity step.

    """

    NONE = "NONE"
    ID = "ID"
    TPLPH = "TPLPH"
    URI = "URI"
    URIFORM = "URIFORM"
    UTF8 = "UTF8"
    SHA1 = "SHA1"
    VSA = "VSA"
    VSAU = "VSAU"
    FILENAME = "FILENAME"
    JAVA = "JAVA"
    JAVASCRIPT = "JAVASCRIPT"
    JSDOUBLE = "JSDOUBLE"
    JSSINGLE = "JSSINGLE"
    JAVAID = "JAVAID"
    JAVASQLID = "JAVASQLID"
    JAVAPROP = "JAVAPROP"
    CSV = "CSV"
    QUOTEDD = "QUOTEDD"
    QUOTEDS = "QUOTEDS"
    DOCBOOK = "DOCBOOK"
    DOCPAGE = "DOCPAGE"
    DOCLET = "DOCLET"
    JAVADOC = "JAVADOC"
    HTML = "HTML"
    HTMLPRE = "HTMLPRE"
    WIKI = "WIKI"
    XML = "XML"
    XMLATT = "XMLATT"
    XMLITEXT = "XMLITEXT"
    MC = "MC"
    MCB = "MCB"
    LCU = "LCU"
    LCD = "LCD"
    LC = "LC"
    UCU = "UCU"
    UCD = "UCD"
    UC = "UC"
    CB = "CB"
    STUC = "STUC"
    SQL = "SQL"
    SQLID = "SQLID"
    INDENT = "INDENT"
    ABBREV = "ABBREV"
    INTEGER = "INTEGER"
    FLOAT = "FLOAT"
    FORMAT = "FORMAT"
    REGEXP = "REGEXP"
    REESC = "REESC"
    JSON = "JSON"
    TEX = "TEX"
    BASE64 = "BASE64"
    DSP = "DSP"
    SSP = "SSP"
    FIXED = "FIXED"

    @classmethod
    def from_token(cls, token: str) -> FormatTag:
        """Resolve a recipe token to a tag, ignoring case.

        Parameters
        ----------
        token : str
            Tag name as written in a recipe (e.g. ``"uri"`` or ``"UTF8"``)

        Returns
        -------
        FormatTag
            The matching tag

        Raises
        ------
        UnknownFormatTagError
            If no tag carries that name

        """
        tag = _TAGS_BY_NAME.get(token.strip().upper())
        if tag is None:
            from recoder.exceptions import UnknownFormatTagError

            raise UnknownFormatTagError(token)
        return tag

    def __str__(self) -> str:
        return self.value


_TAGS_BY_NAME: dict[str, FormatTag] = {tag.value: tag for tag in FormatTag}

# =============================================================================
# Recipe Syntax
# =============================================================================

STEP_SEPARATOR = "/"
OPTION_SEPARATOR = ","
OPTION_OPENERS = ("(", "[")
OPTION_CLOSERS = (")", "]")

# Option values in a recipe are either integers or text
OptionValue = int | str

# =============================================================================
# Codec Defaults
# =============================================================================

# UTF8 -> INDENT
DEFAULT_INDENT_TEXT = " "
DEFAULT_INDENT_AMOUNT = 0

# UTF8 -> ABBREV
DEFAULT_ABBREV_LIMIT = 32
DEFAULT_ABBREV_SUFFIX = "..."

# UTF8 -> FIXED
FixedJustification = Literal["L", "R", "C", "l", "r", "c"]
DEFAULT_FIXED_LENGTH = 32
DEFAULT_FIXED_FILL = " "
DEFAULT_FIXED_JUSTIFICATION: FixedJustification = "L"

# * -> FORMAT
DEFAULT_TEXT_FORMAT = "%s"
DEFAULT_INTEGER_FORMAT = "%d"
DEFAULT_FLOAT_FORMAT = "%f"

# Block size used when draining unbounded sources
DEFAULT_STREAM_BLOCK_SIZE = 8192

# Entry point group scanned for third-party codecs
CODEC_ENTRY_POINT_GROUP = "recoder.codecs"

# =============================================================================
# Character Tables
# =============================================================================

# RFC 2396 character classes for the 7-bit range:
# 0 alnum, 1 mark, 2 reserved, 3 unsafe, 4 control
URI_ALNUM = 0
URI_MARK = 1
URI_RESERVED = 2
URI_UNSAFE = 3
URI_CONTROL = 4

_URI_MARKS = "!'()*-._~"
_URI_RESERVED = "$&+,/:;=?@"
_URI_UNSAFE = ' "#%<>[\\]^`{|}'


def _build_uri_char_codes() -> tuple[int, ...]:
    codes = []
    for code_point in range(128):
        char = chr(code_point)
        if code_point < 0x20 or code_point == 0x7F:
            codes.append(URI_CONTROL)
        elif char.isalnum():
            codes.append(URI_ALNUM)
        elif char in _URI_MARKS:
            codes.append(URI_MARK)
        elif char in _URI_RESERVED:
            codes.append(URI_RESERVED)
        else:
            codes.append(URI_UNSAFE)
    return tuple(codes)


URI_CHAR_CODES: tuple[int, ...] = _build_uri_char_codes()

# Bytes kept verbatim by UTF8 -> FILENAME; every other byte becomes "_"
FILENAME_SAFE_BYTES = frozenset(
    b"0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz-._{|}~"
)
FILENAME_REPLACEMENT = "_"

# Identifiers that clash with reserved words of the target language
JAVA_RESERVED_IDENTIFIERS = frozenset(
    {"interface", "class", "package", "private", "default", "protected", "public", "final", "static", "return"}
)
JAVA_LOWERCASE_RESERVED = frozenset({"interface", "class", "package", "private", "default", "protected", "public"})
SQL_RESERVED_IDENTIFIERS = frozenset({"select", "update", "alter", "procedure", "class", "user", "from"})
SQL_UPPERCASE_RESERVED = frozenset(
    {"SELECT", "UPDATE", "ALTER", "PROCEDURE", "CLASS", "USER", "FROM", "TO", "CONSTRAINT"}
)

__all__ = [
    "FormatTag",
    "OptionValue",
    "STEP_SEPARATOR",
    "OPTION_SEPARATOR",
    "OPTION_OPENERS",
    "OPTION_CLOSERS",
    "DEFAULT_INDENT_TEXT",
    "DEFAULT_INDENT_AMOUNT",
    "DEFAULT_ABBREV_LIMIT",
    "DEFAULT_ABBREV_SUFFIX",
    "FixedJustification",
    "DEFAULT_FIXED_LENGTH",
    "DEFAULT_FIXED_FILL",
    "DEFAULT_FIXED_JUSTIFICATION",
    "DEFAULT_TEXT_FORMAT",
    "DEFAULT_INTEGER_FORMAT",
    "DEFAULT_FLOAT_FORMAT",
    "DEFAULT_STREAM_BLOCK_SIZE",
    "CODEC_ENTRY_POINT_GROUP",
    "URI_ALNUM",
    "URI_MARK",
    "URI_RESERVED",
    "URI_UNSAFE",
    "URI_CONTROL",
    "URI_CHAR_CODES",
    "FILENAME_SAFE_BYTES",
    "FILENAME_REPLACEMENT",
    "JAVA_RESERVED_IDENTIFIERS",
    "JAVA_LOWERCASE_RESERVED",
    "SQL_RESERVED_IDENTIFIERS",
    "SQL_UPPERCASE_RESERVED",
]
