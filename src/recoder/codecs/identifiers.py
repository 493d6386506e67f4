#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/recoder/codecs/identifiers.py
"""Identifier casing and reserved-word codecs.

Casing tags describe how words are joined in an identifier:

- ``MC``  mixed case, ``fooBarBaz`` or ``FooBarBaz``
- ``MCB`` mixed case with blanks, ``Foo Bar Baz``
- ``LCU`` / ``UCU`` lower or upper case with underscores, ``foo_bar``
- ``LCD`` / ``UCD`` lower or upper case with dashes, ``foo-bar``
- ``LC`` / ``UC`` all lower or all upper case
- ``CB`` camel back (first letter lower), ``STUC`` first letter upper

Casing is plain ASCII-oriented case mapping and is not locale aware.
The ``*->JAVAID`` and ``*->SQLID`` codecs prefix identifiers that would
collide with a reserved word of the target language.

"""

from __future__ import annotations

import re

from recoder.codecs._base import text_codec, translate_codec
from recoder.constants import (
    JAVA_LOWERCASE_RESERVED,
    JAVA_RESERVED_IDENTIFIERS,
    SQL_RESERVED_IDENTIFIERS,
    SQL_UPPERCASE_RESERVED,
    FormatTag,
)
from recoder.metadata import CodecMetadata

_WORD_START = re.compile(r"\B([A-Z])([a-z0-9])")
_CAPITAL_RUN = re.compile(r"([a-z0-9])([A-Z]+)")
_UPPER_RUN = re.compile(r"[A-Z]+")
_UNDERSCORE_LETTER = re.compile(r"_([a-z])")
_LEADING_LOWER = re.compile(r"^([a-z])")

_JAVA_CAPITALIZED_RESERVED = frozenset(word.capitalize() for word in JAVA_LOWERCASE_RESERVED)


def mixed_to_lower_underscore(text: str) -> str:
    """Convert ``fooBarBaz`` to ``foo_bar_baz``.

    Examples
    --------
        >>> mixed_to_lower_underscore("parseHTTPResponse")
        'parse_http_response'

    """
    text = _WORD_START.sub(lambda m: "_" + m.group(1).lower() + m.group(2), text)
    text = _CAPITAL_RUN.sub(lambda m: m.group(1) + "_" + m.group(2).lower(), text)
    return _UPPER_RUN.sub(lambda m: m.group(0).lower(), text)


def mixed_to_upper_underscore(text: str) -> str:
    """Convert ``fooBarBaz`` to ``FOO_BAR_BAZ``."""
    text = _WORD_START.sub(lambda m: "_" + m.group(1) + m.group(2).upper(), text)
    text = _CAPITAL_RUN.sub(lambda m: m.group(1).upper() + "_" + m.group(2), text)
    return text.upper()


def mixed_to_blank_separated(text: str) -> str:
    """Convert ``fooBarBaz`` to ``foo Bar Baz``."""
    text = _WORD_START.sub(lambda m: " " + m.group(1) + m.group(2), text)
    return _CAPITAL_RUN.sub(lambda m: m.group(1) + " " + m.group(2), text)


def lower_underscore_to_mixed(text: str) -> str:
    """Convert ``foo_bar_baz`` to ``FooBarBaz``."""
    text = _UNDERSCORE_LETTER.sub(lambda m: m.group(1).upper(), text)
    return _LEADING_LOWER.sub(lambda m: m.group(1).upper(), text)


def lower_first(text: str) -> str:
    return text[:1].lower() + text[1:]


def upper_first(text: str) -> str:
    return text[:1].upper() + text[1:]


def remove_blanks(text: str) -> str:
    return text.replace(" ", "")


def to_lower(text: str) -> str:
    return text.lower()


def to_upper(text: str) -> str:
    return text.upper()


def java_identifier(text: str) -> str:
    """Prefix ``j_`` to Java reserved words and to names already starting with it."""
    if text in JAVA_RESERVED_IDENTIFIERS or text.startswith("j_"):
        return "j_" + text
    return text


def java_lowercase_identifier(text: str) -> str:
    """Prefix ``j`` to reserved all-lowercase words and to names starting with ``j``."""
    if text in JAVA_LOWERCASE_RESERVED or text.startswith("j"):
        return "j" + text
    return text


def java_mixed_identifier(text: str) -> str:
    """Prefix ``J`` to capitalized reserved words and to names starting with ``J``."""
    if text in _JAVA_CAPITALIZED_RESERVED or text.startswith("J"):
        return "J" + text
    return text


def java_sql_identifier(text: str) -> str:
    """Make a name safe both as a Java identifier and as an SQL column.

    Examples
    --------
        >>> java_sql_identifier("select")
        's_select'
        >>> java_sql_identifier("class")
        'j_class'

    """
    text = java_identifier(text)
    if text.lower() in SQL_RESERVED_IDENTIFIERS or text.lower().startswith("s_"):
        return "s_" + text
    return text


def sql_identifier(text: str) -> str:
    """Prefix ``X_`` to upper-case SQL reserved words and names starting with it."""
    if text in SQL_UPPERCASE_RESERVED or text.startswith("X_"):
        return "X_" + text
    return text


def template_placeholder(text: str) -> str:
    """Wrap an identifier as a ``${...}`` template placeholder."""
    return "${" + text + "}"


def _casing(source: FormatTag, target: FormatTag, transform, description: str) -> CodecMetadata:
    return CodecMetadata(
        source=source,
        target=target,
        func=text_codec(transform),
        description=description,
        stream_safe=False,
        category="identifiers",
    )


def _separator(source: FormatTag, target: FormatTag, old: str, new: str) -> CodecMetadata:
    return CodecMetadata(
        source=source,
        target=target,
        func=translate_codec(str.maketrans(old, new)),
        description=f"Replace '{old}' with '{new}'",
        category="identifiers",
    )


IDENTIFIER_CODECS: list[CodecMetadata] = [
    _casing(FormatTag.MC, FormatTag.LCU, mixed_to_lower_underscore, "fooBar -> foo_bar"),
    _casing(FormatTag.MC, FormatTag.UCU, mixed_to_upper_underscore, "fooBar -> FOO_BAR"),
    _casing(FormatTag.MC, FormatTag.MCB, mixed_to_blank_separated, "fooBar -> foo Bar"),
    _casing(FormatTag.MC, FormatTag.LC, to_lower, "fooBar -> foobar"),
    _casing(FormatTag.MC, FormatTag.UC, to_upper, "fooBar -> FOOBAR"),
    _casing(FormatTag.LC, FormatTag.UC, to_upper, "foobar -> FOOBAR"),
    _casing(FormatTag.MC, FormatTag.CB, lower_first, "FooBar -> fooBar"),
    _casing(FormatTag.MC, FormatTag.STUC, upper_first, "fooBar -> FooBar"),
    _casing(FormatTag.LCU, FormatTag.MC, lower_underscore_to_mixed, "foo_bar -> FooBar"),
    _casing(FormatTag.MCB, FormatTag.MC, remove_blanks, "Foo Bar -> FooBar"),
    _separator(FormatTag.LCU, FormatTag.LCD, "_", "-"),
    _separator(FormatTag.LCD, FormatTag.LCU, "-", "_"),
    _separator(FormatTag.UCU, FormatTag.UCD, "_", "-"),
    _separator(FormatTag.DSP, FormatTag.SSP, ".", "/"),
    _separator(FormatTag.SSP, FormatTag.DSP, "/", "."),
    _casing(FormatTag.UTF8, FormatTag.JAVAID, java_identifier, "Prefix 'j_' to Java reserved words"),
    _casing(FormatTag.LCU, FormatTag.JAVAID, java_identifier, "Prefix 'j_' to Java reserved words"),
    _casing(FormatTag.LC, FormatTag.JAVAID, java_lowercase_identifier, "Prefix 'j' to Java reserved words"),
    _casing(FormatTag.MC, FormatTag.JAVAID, java_mixed_identifier, "Prefix 'J' to capitalized reserved words"),
    _casing(FormatTag.UTF8, FormatTag.JAVASQLID, java_sql_identifier, "Java identifier safe as SQL column"),
    _casing(FormatTag.UCU, FormatTag.SQLID, sql_identifier, "Prefix 'X_' to SQL reserved words"),
    _casing(FormatTag.ID, FormatTag.TPLPH, template_placeholder, "name -> ${name}"),
]

__all__ = [
    "mixed_to_lower_underscore",
    "mixed_to_upper_underscore",
    "mixed_to_blank_separated",
    "lower_underscore_to_mixed",
    "lower_first",
    "upper_first",
    "java_identifier",
    "java_lowercase_identifier",
    "java_mixed_identifier",
    "java_sql_identifier",
    "sql_identifier",
    "template_placeholder",
    "IDENTIFIER_CODECS",
]
