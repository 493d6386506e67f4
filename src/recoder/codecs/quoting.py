#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/recoder/codecs/quoting.py
"""String literal and markup escaping codecs.

Codecs in this module make text safe for embedding in a quoted string of
some host language (Java, JavaScript, JSON, CSV, SQL) or in markup (XML,
HTML, TeX). Most of them map every character independently and therefore
stream; JSON and TeX look at neighbouring characters and need the whole
text when it is fed in pieces.

"""

from __future__ import annotations

import html
import re
from typing import Iterator

from recoder.codecs._base import char_codec, text_codec, translate_codec
from recoder.constants import FormatTag
from recoder.metadata import CodecMetadata
from recoder.sources import CharacterSource, TextSink
from recoder.state import RecodingTargetState

# Characters protected from TeX escaping: everything between the brackets is
# copied verbatim and the brackets themselves are dropped
TEX_PROTECT_OPEN = "⟦"
TEX_PROTECT_CLOSE = "⟧"

_CDATA = re.compile(r"^<!\[CDATA\[(.*)\]\]>$", re.DOTALL)


def _utf16_escape(code: int) -> str:
    """Render a code point as one or two ``\\uXXXX`` escapes."""
    if code <= 0xFFFF:
        return f"\\u{code:04X}"
    code -= 0x10000
    return f"\\u{0xD800 + (code >> 10):04X}\\u{0xDC00 + (code & 0x3FF):04X}"


_JAVA_ESCAPES = {"\n": "\\n", "\r": "\\r", "\t": "\\t", '"': '\\"', "\\": "\\\\"}

_JS_ESCAPES = {"\b": "\\b", "\f": "\\f", "\n": "\\n", "\r": "\\r", "\t": "\\t", "\v": "\\v", "\\": "\\\\"}


def _escape_literal_char(char: str, escapes: dict[str, str]) -> str:
    replacement = escapes.get(char)
    if replacement is not None:
        return replacement
    code = ord(char)
    if 0x20 <= code <= 0x7F:
        return char
    return _utf16_escape(code)


def escape_java_char(char: str) -> str:
    r"""Escape one character for a Java string literal.

    Printable ASCII is kept; everything else becomes a ``\uXXXX`` escape
    (a surrogate pair outside the Basic Multilingual Plane).

    Examples
    --------
        >>> escape_java_char('"')
        '\\"'
        >>> escape_java_char("é")
        '\\u00E9'

    """
    return _escape_literal_char(char, _JAVA_ESCAPES)


def escape_jsdouble_char(char: str) -> str:
    """Escape one character for a double-quoted JavaScript string."""
    if char == '"':
        return '\\"'
    return _escape_literal_char(char, _JS_ESCAPES)


def escape_jssingle_char(char: str) -> str:
    """Escape one character for a single-quoted JavaScript string."""
    if char == "'":
        return "\\'"
    return _escape_literal_char(char, _JS_ESCAPES)


_JSON_ESCAPES = {"\\": "\\\\", '"': '\\"', "\b": "\\b", "\t": "\\t", "\n": "\\n", "\f": "\\f", "\r": "\\r"}


def _needs_json_unicode_escape(code: int) -> bool:
    return code < 0x20 or 0x80 <= code < 0xA0 or 0x2000 <= code < 0x2100


def _json_chunks(chunks: Iterator[str]) -> Iterator[str]:
    previous = ""
    for chunk in chunks:
        parts = []
        for char in chunk:
            replacement = _JSON_ESCAPES.get(char)
            if replacement is not None:
                parts.append(replacement)
            elif char == "/":
                parts.append("\\/" if previous == "<" else "/")
            elif _needs_json_unicode_escape(ord(char)):
                parts.append(f"\\u{ord(char):04x}")
            else:
                parts.append(char)
            previous = char
        yield "".join(parts)


def escape_json(text: str) -> str:
    r"""Escape text for the inside of a JSON string.

    Besides the mandatory escapes, C1 controls and the U+2000 block are
    written as lowercase ``\uXXXX`` and ``</`` becomes ``<\/`` so the result
    can be embedded in an HTML script element.

    Examples
    --------
        >>> escape_json('say "</b>"')
        'say \\"<\\/b>\\"'

    """
    return "".join(_json_chunks(iter([text])))


def _json_codec(source: CharacterSource, sink: TextSink, state: RecodingTargetState) -> None:
    for output in _json_chunks(source.iter_chunks()):
        if output:
            sink.write(output)


_TEX_ESCAPES = {
    "%": "\\%",
    "&": "\\&",
    "$": "\\$",
    "#": "\\#",
    "{": "\\{",
    "}": "\\}",
    "_": "\\_",
    "\n": "\\\\",
    "¶": "\\P{}",
    "|": "\\textbar{}",
    "<": "\\textless{}",
    ">": "\\textgreater{}",
    "–": "\\textendash{}",
    "§": "\\S{}",
    "\\": "\\textbackslash{}",
    "—": "\\textemdash{}",
    "^": "\\textasciicircum{}",
    "~": "\\~{}",
}


def _tex_chunks(chunks: Iterator[str]) -> Iterator[str]:
    protected = False
    for chunk in chunks:
        parts = []
        for char in chunk:
            if protected:
                if char == TEX_PROTECT_CLOSE:
                    protected = False
                else:
                    parts.append(char)
            elif char == TEX_PROTECT_OPEN:
                protected = True
            else:
                parts.append(_TEX_ESCAPES.get(char, char))
        yield "".join(parts)


def escape_tex(text: str) -> str:
    r"""Escape text for LaTeX.

    Text between U+27E6 and U+27E7 is copied without escaping and the two
    brackets are dropped. An unterminated protected region runs to the end.

    Examples
    --------
        >>> escape_tex("50% of $x_1$")
        '50\\% of \\$x\\_1\\$'
        >>> escape_tex("⟦\\emph{a}⟧_b")
        '\\emph{a}\\_b'

    """
    return "".join(_tex_chunks(iter([text])))


def _tex_codec(source: CharacterSource, sink: TextSink, state: RecodingTargetState) -> None:
    for output in _tex_chunks(source.iter_chunks()):
        if output:
            sink.write(output)


def unescape_xml(text: str) -> str:
    """Strip a CDATA wrapper and decode ``&lt;``, ``&gt;`` and ``&amp;``."""
    match = _CDATA.match(text)
    if match:
        text = match.group(1)
    return text.replace("&lt;", "<").replace("&gt;", ">").replace("&amp;", "&")


def escape_html(text: str) -> str:
    """Escape HTML special characters to entities, quotes included."""
    return html.escape(text, quote=True)


_CSV_TABLE = str.maketrans({'"': '""'})
_QUOTEDD_TABLE = str.maketrans({'"': '\\"', "\\": "\\\\"})
_QUOTEDS_TABLE = str.maketrans({"'": "\\'", "\\": "\\\\"})
_SQL_TABLE = str.maketrans({"'": "''"})
_XML_TABLE = str.maketrans({"<": "&lt;", ">": "&gt;", "&": "&amp;"})
_XMLATT_TABLE = str.maketrans(
    {"<": "&lt;", ">": "&gt;", "&": "&amp;", '"': "&quot;", "'": "&apos;", "\n": "&#13;&#10;"}
)
_REESC_TABLE = str.maketrans({char: "\\" + char for char in "+*.?{}()[]"})


QUOTING_CODECS: list[CodecMetadata] = [
    CodecMetadata(
        source=FormatTag.UTF8,
        target=FormatTag.JAVA,
        func=char_codec(escape_java_char),
        description="Escape for a Java string literal",
        category="quoting",
    ),
    CodecMetadata(
        source=FormatTag.UTF8,
        target=FormatTag.JSDOUBLE,
        func=char_codec(escape_jsdouble_char),
        description="Escape for a double-quoted JavaScript string",
        category="quoting",
    ),
    CodecMetadata(
        source=FormatTag.UTF8,
        target=FormatTag.JAVASCRIPT,
        func=char_codec(escape_jsdouble_char),
        description="Escape for a double-quoted JavaScript string",
        category="quoting",
    ),
    CodecMetadata(
        source=FormatTag.UTF8,
        target=FormatTag.JSSINGLE,
        func=char_codec(escape_jssingle_char),
        description="Escape for a single-quoted JavaScript string",
        category="quoting",
    ),
    CodecMetadata(
        source=FormatTag.UTF8,
        target=FormatTag.JSON,
        func=_json_codec,
        description="Escape for the inside of a JSON string",
        stream_safe=False,
        category="quoting",
    ),
    CodecMetadata(
        source=FormatTag.UTF8,
        target=FormatTag.CSV,
        func=translate_codec(_CSV_TABLE),
        description='Double every \'"\' for a quoted CSV field',
        category="quoting",
    ),
    CodecMetadata(
        source=FormatTag.UTF8,
        target=FormatTag.QUOTEDD,
        func=translate_codec(_QUOTEDD_TABLE),
        description="Backslash-escape '\"' and '\\'",
        category="quoting",
    ),
    CodecMetadata(
        source=FormatTag.UTF8,
        target=FormatTag.QUOTEDS,
        func=translate_codec(_QUOTEDS_TABLE),
        description="Backslash-escape \"'\" and '\\'",
        category="quoting",
    ),
    CodecMetadata(
        source=FormatTag.UTF8,
        target=FormatTag.SQL,
        func=translate_codec(_SQL_TABLE),
        description="Double every \"'\" for an SQL string literal",
        category="quoting",
    ),
    CodecMetadata(
        source=FormatTag.UTF8,
        target=FormatTag.XML,
        func=translate_codec(_XML_TABLE),
        description="Escape '<', '>' and '&' for XML text",
        category="quoting",
    ),
    CodecMetadata(
        source=FormatTag.XML,
        target=FormatTag.UTF8,
        func=text_codec(unescape_xml),
        description="Strip CDATA and decode the basic XML entities",
        stream_safe=False,
        category="quoting",
    ),
    CodecMetadata(
        source=FormatTag.UTF8,
        target=FormatTag.XMLATT,
        func=translate_codec(_XMLATT_TABLE),
        description="Escape for an XML attribute value",
        category="quoting",
    ),
    CodecMetadata(
        source=FormatTag.UTF8,
        target=FormatTag.HTML,
        func=translate_codec(str.maketrans({char: escape_html(char) for char in "&<>\"'"})),
        description="Escape HTML special characters to entities",
        category="quoting",
    ),
    CodecMetadata(
        source=FormatTag.UTF8,
        target=FormatTag.TEX,
        func=_tex_codec,
        description="Escape for LaTeX, keeping ⟦protected⟧ regions verbatim",
        stream_safe=False,
        category="quoting",
    ),
    CodecMetadata(
        source=FormatTag.UTF8,
        target=FormatTag.REESC,
        func=translate_codec(_REESC_TABLE),
        description="Backslash-escape regular expression metacharacters",
        category="quoting",
    ),
]

__all__ = [
    "TEX_PROTECT_OPEN",
    "TEX_PROTECT_CLOSE",
    "escape_java_char",
    "escape_jsdouble_char",
    "escape_jssingle_char",
    "escape_json",
    "escape_tex",
    "unescape_xml",
    "escape_html",
    "QUOTING_CODECS",
]
