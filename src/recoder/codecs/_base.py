#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/recoder/codecs/_base.py
"""Building blocks shared by the built-in codecs.

Most codecs are written as plain ``str -> str`` functions and turned into
codec functions with one of the decorators below:

- :func:`char_codec` for codecs that map every character on its own. The
  input is consumed chunk by chunk, so the codec works on unbounded
  sources and is safe to apply to a text split at any point.
- :func:`text_codec` for codecs that need the whole text at once, such as
  truncation, hashing or regex rewriting.

"""

from __future__ import annotations

from functools import wraps
from typing import Any, Callable

from recoder.metadata import CodecFunction
from recoder.sources import CharacterSource, TextSink
from recoder.state import RecodingTargetState


def char_codec(escape: Callable[[str], str]) -> CodecFunction:
    """Build a codec applying ``escape`` to each character independently.

    Parameters
    ----------
    escape : callable
        Maps a single character to its replacement text

    Returns
    -------
    CodecFunction
        Codec function streaming its input chunk by chunk

    """

    @wraps(escape)
    def codec(source: CharacterSource, sink: TextSink, state: RecodingTargetState) -> None:
        for chunk in source.iter_chunks():
            output = "".join(map(escape, chunk))
            if output:
                sink.write(output)

    return codec


def translate_codec(table: dict[int, str]) -> CodecFunction:
    """Build a codec replacing characters through a ``str.translate`` table."""

    def codec(source: CharacterSource, sink: TextSink, state: RecodingTargetState) -> None:
        for chunk in source.iter_chunks():
            output = chunk.translate(table)
            if output:
                sink.write(output)

    return codec


def text_codec(transform: Callable[..., str]) -> CodecFunction:
    """Build a codec applying ``transform`` to the whole remaining text.

    Keyword options resolved from the recipe are passed through to
    ``transform``. Nothing is written when the result is empty.

    """

    @wraps(transform)
    def codec(source: CharacterSource, sink: TextSink, state: RecodingTargetState, **options: Any) -> None:
        output = transform(source.read_remaining(), **options)
        if output:
            sink.write(output)

    return codec


__all__ = ["char_codec", "translate_codec", "text_codec"]
