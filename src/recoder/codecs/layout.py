#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/recoder/codecs/layout.py
"""Layout codecs: indentation, truncation, padding, formatting and rewriting.

These codecs take options from the recipe, e.g. ``UTF8/INDENT("  ",2)`` or
``UTF8/FIXED(10,"0",R)``. :func:`indent_codec` is the only line-sensitive
codec of the catalog; it keeps track of whether the output is at the start
of a line in the :class:`~recoder.state.RecodingTargetState` so a text fed
in arbitrary pieces is indented exactly as if it arrived in one call.

"""

from __future__ import annotations

import logging
import re

from recoder.codecs._base import text_codec
from recoder.constants import (
    DEFAULT_ABBREV_LIMIT,
    DEFAULT_ABBREV_SUFFIX,
    DEFAULT_FIXED_FILL,
    DEFAULT_FIXED_JUSTIFICATION,
    DEFAULT_FIXED_LENGTH,
    DEFAULT_FLOAT_FORMAT,
    DEFAULT_INDENT_AMOUNT,
    DEFAULT_INDENT_TEXT,
    DEFAULT_INTEGER_FORMAT,
    DEFAULT_TEXT_FORMAT,
    FormatTag,
)
from recoder.exceptions import RecodingError
from recoder.metadata import CodecMetadata, OptionSpec
from recoder.sources import CharacterSource, TextSink
from recoder.state import RecodingTargetState

logger = logging.getLogger(__name__)

_LINE_SEGMENT = re.compile(r"[^\n]*\n|[^\n]+")
_INTEGER_TEXT = re.compile(r"^ *([0-9]+) *$")
_JAVA_GROUP_REFERENCE = re.compile(r"\\\$|\$(\d+)|\$\{(\w+)\}")
_LEADING_BLANK_LINES = re.compile(r"^[ \n]*\n")
_TRAILING_BLANKS = re.compile(r"[ \n]*\Z")


def indent_codec(
    source: CharacterSource,
    sink: TextSink,
    state: RecodingTargetState,
    indent: str = DEFAULT_INDENT_TEXT,
    amount: int = DEFAULT_INDENT_AMOUNT,
) -> None:
    """Prefix every line with ``indent`` repeated ``amount`` times.

    A prefix is written before the first character of a line only. Whether
    the output currently is at the start of a line is read from ``state``
    before each segment and written back after it, so a line split across
    several calls is indented once.

    Parameters
    ----------
    source : CharacterSource
        Text to indent
    sink : TextSink
        Receives the indented text
    state : RecodingTargetState
        Line position of the output stream
    indent : str, default " "
        Indentation unit
    amount : int, default 0
        Number of indentation units per line

    """
    prefix = indent * amount
    for chunk in source.iter_chunks():
        parts = []
        for match in _LINE_SEGMENT.finditer(chunk):
            segment = match.group(0)
            if state.at_line_start and prefix:
                parts.append(prefix)
            parts.append(segment)
            state.track(segment)
        if parts:
            sink.write("".join(parts))


def abbreviate(text: str, limit: int = DEFAULT_ABBREV_LIMIT, suffix: str = DEFAULT_ABBREV_SUFFIX) -> str:
    """Cut text longer than ``limit`` characters and append ``suffix``.

    Examples
    --------
        >>> abbreviate("hello world", 5)
        'hello...'
        >>> abbreviate("hello", 5)
        'hello'

    """
    if len(text) > limit:
        return text[:limit] + suffix
    return text


def fixed_width(
    text: str,
    length: int = DEFAULT_FIXED_LENGTH,
    fill: str = DEFAULT_FIXED_FILL,
    justification: str = DEFAULT_FIXED_JUSTIFICATION,
) -> str:
    """Pad or truncate text to exactly ``length`` characters.

    Parameters
    ----------
    text : str
        Text to fit
    length : int, default 32
        Target width
    fill : str, default " "
        Padding, repeated once per missing character
    justification : {"L", "R", "C"}, default "L"
        Where the text sits, case-insensitive. Centering puts the smaller
        half of the padding on the left.

    Returns
    -------
    str
        The fitted text; longer input is truncated on the right

    Examples
    --------
        >>> fixed_width("ab", 5, ".", "C")
        '.ab..'

    """
    if len(text) >= length:
        return text[:length]
    missing = length - len(text)
    side = justification.upper()
    if side == "R":
        return fill * missing + text
    if side == "C":
        return fill * (missing // 2) + text + fill * (missing // 2 + missing % 2)
    return text + fill * missing


def _python_replacement(replacement: str) -> str:
    """Translate ``$1`` and ``${name}`` group references to ``re.sub`` syntax."""

    def convert(match: re.Match[str]) -> str:
        if match.group(0) == "\\$":
            return "$"
        return f"\\g<{match.group(1) or match.group(2)}>"

    return _JAVA_GROUP_REFERENCE.sub(convert, replacement)


def rewrite(text: str, pattern: str = "", replacement: str = "") -> str:
    """Replace every match of ``pattern``.

    Group references in ``replacement`` may be written either ``$1`` or
    ``\\1``.

    Raises
    ------
    RecodingError
        If the replacement refers to a group the pattern does not have

    """
    try:
        return re.sub(pattern, _python_replacement(replacement), text)
    except (re.error, IndexError) as e:
        raise RecodingError(
            f"Cannot rewrite with pattern {pattern!r}: {e}", source_tag="UTF8", target_tag="REGEXP", original_error=e
        ) from e


def _apply_format(format_string: str, value: object, source_tag: str) -> str:
    try:
        return format_string % value
    except (TypeError, ValueError) as e:
        raise RecodingError(
            f"Cannot apply format {format_string!r}: {e}", source_tag=source_tag, target_tag="FORMAT", original_error=e
        ) from e


def format_text(text: str, format: str = DEFAULT_TEXT_FORMAT) -> str:
    """Apply a printf-style format to the text."""
    return _apply_format(format, text, "UTF8")


def format_integer(text: str, format: str = DEFAULT_INTEGER_FORMAT) -> str:
    """Parse a non-negative integer (blanks around it allowed) and format it.

    Raises
    ------
    RecodingError
        If the text is not an integer

    """
    match = _INTEGER_TEXT.match(text)
    if match is None:
        raise RecodingError(f"Not an integer: {text!r}", source_tag="INTEGER", target_tag="FORMAT")
    return _apply_format(format, int(match.group(1)), "INTEGER")


def format_float(text: str, format: str = DEFAULT_FLOAT_FORMAT) -> str:
    """Parse a floating point number (blanks around it allowed) and format it."""
    try:
        value = float(text.strip(" "))
    except ValueError as e:
        raise RecodingError(
            f"Not a number: {text!r}", source_tag="FLOAT", target_tag="FORMAT", original_error=e
        ) from e
    return _apply_format(format, value, "FLOAT")


def strip_indented_text(text: str) -> str:
    """Remove the indentation of a text block embedded in XML.

    Leading blank lines and trailing blanks are dropped, then the leading
    spaces of the first line are removed from every line that starts with
    them.

    Examples
    --------
        >>> strip_indented_text("\\n    a\\n      b\\n  ")
        'a\\n  b'

    """
    text = _LEADING_BLANK_LINES.sub("", text, count=1)
    text = _TRAILING_BLANKS.sub("", text, count=1)
    margin = len(text) - len(text.lstrip(" "))
    if not margin:
        return text
    return re.sub(r"(^|\n)" + " " * margin, r"\1", text)


def _is_valid_pattern(pattern: str) -> bool:
    try:
        re.compile(pattern)
    except re.error as e:
        logger.debug(f"Rejected regular expression {pattern!r}: {e}")
        return False
    return True


def _non_negative(value: int) -> bool:
    return value >= 0


LAYOUT_CODECS: list[CodecMetadata] = [
    CodecMetadata(
        source=FormatTag.UTF8,
        target=FormatTag.INDENT,
        func=indent_codec,
        description="Indent every line",
        options=[
            OptionSpec("indent", str, default=DEFAULT_INDENT_TEXT, help="Indentation unit"),
            OptionSpec(
                "amount", int, default=DEFAULT_INDENT_AMOUNT, help="Units per line", validator=_non_negative
            ),
        ],
        line_sensitive=True,
        category="layout",
    ),
    CodecMetadata(
        source=FormatTag.UTF8,
        target=FormatTag.ABBREV,
        func=text_codec(abbreviate),
        description="Truncate long text and append a suffix",
        options=[
            OptionSpec("limit", int, default=DEFAULT_ABBREV_LIMIT, help="Maximum length", validator=_non_negative),
            OptionSpec("suffix", str, default=DEFAULT_ABBREV_SUFFIX, help="Appended when truncated"),
        ],
        stream_safe=False,
        category="layout",
    ),
    CodecMetadata(
        source=FormatTag.UTF8,
        target=FormatTag.FIXED,
        func=text_codec(fixed_width),
        description="Pad or truncate to a fixed width",
        options=[
            OptionSpec("length", int, default=DEFAULT_FIXED_LENGTH, help="Width", validator=_non_negative),
            OptionSpec("fill", str, default=DEFAULT_FIXED_FILL, help="Padding"),
            OptionSpec(
                "justification",
                str,
                default=DEFAULT_FIXED_JUSTIFICATION,
                help="L, R or C",
                choices=["L", "R", "C", "l", "r", "c"],
            ),
        ],
        stream_safe=False,
        category="layout",
    ),
    CodecMetadata(
        source=FormatTag.UTF8,
        target=FormatTag.REGEXP,
        func=text_codec(rewrite),
        description="Replace every match of a regular expression",
        options=[
            OptionSpec("pattern", str, default="", help="Regular expression", validator=_is_valid_pattern),
            OptionSpec("replacement", str, default="", help="Replacement, $1 refers to a group"),
        ],
        stream_safe=False,
        category="layout",
    ),
    CodecMetadata(
        source=FormatTag.UTF8,
        target=FormatTag.FORMAT,
        func=text_codec(format_text),
        description="Apply a printf-style format",
        options=[OptionSpec("format", str, default=DEFAULT_TEXT_FORMAT, help="Format string")],
        stream_safe=False,
        category="layout",
    ),
    CodecMetadata(
        source=FormatTag.INTEGER,
        target=FormatTag.FORMAT,
        func=text_codec(format_integer),
        description="Parse an integer and apply a printf-style format",
        options=[OptionSpec("format", str, default=DEFAULT_INTEGER_FORMAT, help="Format string")],
        stream_safe=False,
        category="layout",
    ),
    CodecMetadata(
        source=FormatTag.FLOAT,
        target=FormatTag.FORMAT,
        func=text_codec(format_float),
        description="Parse a number and apply a printf-style format",
        options=[OptionSpec("format", str, default=DEFAULT_FLOAT_FORMAT, help="Format string")],
        stream_safe=False,
        category="layout",
    ),
    CodecMetadata(
        source=FormatTag.XMLITEXT,
        target=FormatTag.UTF8,
        func=text_codec(strip_indented_text),
        description="Remove the indentation of a text block embedded in XML",
        stream_safe=False,
        category="layout",
    ),
]

__all__ = [
    "indent_codec",
    "abbreviate",
    "fixed_width",
    "rewrite",
    "format_text",
    "format_integer",
    "format_float",
    "strip_indented_text",
    "LAYOUT_CODECS",
]
