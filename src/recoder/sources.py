#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/recoder/sources.py
"""Pull-based character sources feeding the recoding codecs.

Every codec reads its input from a :class:`CharacterSource`, whether the
text arrives as an in-memory string or as an open stream. Two concrete
sources are provided:

- :class:`TextSource` wraps a materialized string. Its remaining length is
  known and draining it is a single bulk write.
- :class:`StreamSource` wraps a readable text stream. Its length is unknown
  and it can be consumed exactly once.

A sink is any object with a ``write(str)`` method, such as ``io.StringIO``,
an open text file, ``sys.stdout`` or a :class:`recoder.writer.RecodingWriter`.

Examples
--------
    >>> import io
    >>> source = TextSource("abc")
    >>> source.read()
    'a'
    >>> source.known_length()
    2
    >>> buffer = io.StringIO()
    >>> source.drain_into(buffer)
    >>> buffer.getvalue()
    'bc'

"""

from __future__ import annotations

import abc
import io
from typing import Iterator, Optional, Protocol, Union, runtime_checkable

from recoder.constants import DEFAULT_STREAM_BLOCK_SIZE
from recoder.exceptions import SourceConsumedError

# Returned by read() once the source is exhausted
END_OF_INPUT = ""


@runtime_checkable
class TextSink(Protocol):
    """Anything text can be appended to."""

    def write(self, text: str, /) -> object:
        """Append ``text``."""
        ...


@runtime_checkable
class ReadableText(Protocol):
    """Readable text stream as accepted by :class:`StreamSource`."""

    def read(self, size: int = -1, /) -> str:
        """Read up to ``size`` characters."""
        ...


class CharacterSource(abc.ABC):
    """Forward-only view of the characters of one input.

    A source is owned by exactly one in-flight recoding call and is not
    safe to share between threads.

    """

    @abc.abstractmethod
    def read(self) -> str:
        """Return the next character, or ``END_OF_INPUT`` when exhausted."""

    @abc.abstractmethod
    def known_length(self) -> Optional[int]:
        """Return the number of remaining characters, or None if unknown."""

    def drain_into(self, sink: TextSink) -> None:
        """Copy everything remaining into ``sink``.

        The default copies one character at a time. Subclasses override it
        with a bulk path.

        Parameters
        ----------
        sink : TextSink
            Destination of the remaining characters

        """
        while True:
            char = self.read()
            if char == END_OF_INPUT:
                return
            sink.write(char)

    def read_remaining(self) -> str:
        """Materialize the remaining characters as one string."""
        buffer = io.StringIO()
        self.drain_into(buffer)
        return buffer.getvalue()

    def iter_chunks(self) -> Iterator[str]:
        """Yield the remaining characters as one or more non-empty pieces.

        Codecs that map each character independently consume their input
        this way so unbounded sources are never fully materialized.

        """
        remaining = self.read_remaining()
        if remaining:
            yield remaining

    def __iter__(self) -> Iterator[str]:
        while True:
            char = self.read()
            if char == END_OF_INPUT:
                return
            yield char


class TextSource(CharacterSource):
    """Materialized source over an in-memory string.

    To read the same text again, construct a fresh instance from
    :attr:`text`.

    Parameters
    ----------
    text : str
        The backing value

    """

    __slots__ = ("_text", "_position")

    def __init__(self, text: str) -> None:
        self._text = text
        self._position = 0

    @property
    def text(self) -> str:
        """The full backing value, independent of the read position."""
        return self._text

    def read(self) -> str:
        if self._position >= len(self._text):
            return END_OF_INPUT
        char = self._text[self._position]
        self._position += 1
        return char

    def known_length(self) -> int:
        return len(self._text) - self._position

    def drain_into(self, sink: TextSink) -> None:
        remaining = self.read_remaining()
        if remaining:
            sink.write(remaining)

    def read_remaining(self) -> str:
        remaining = self._text[self._position :] if self._position else self._text
        self._position = len(self._text)
        return remaining

    def __repr__(self) -> str:
        return f"TextSource(remaining={self.known_length()})"


class StreamSource(CharacterSource):
    """Unbounded, single-pass source over a readable text stream.

    The stream is read in blocks of ``block_size`` characters. Once a bulk
    drain has exhausted the stream, draining again raises
    :class:`~recoder.exceptions.SourceConsumedError`; callers needing two
    passes must first materialize the text into a :class:`TextSource`.
    Read errors of the stream propagate unchanged.

    Parameters
    ----------
    stream : ReadableText
        Any object with a ``read(size)`` method returning text
    block_size : int, default DEFAULT_STREAM_BLOCK_SIZE
        Number of characters requested per read during bulk copies

    """

    def __init__(self, stream: ReadableText, block_size: int = DEFAULT_STREAM_BLOCK_SIZE) -> None:
        if block_size <= 0:
            raise ValueError(f"block_size must be positive, got {block_size}")
        self._stream = stream
        self._block_size = block_size
        self._pending = ""
        self._offset = 0
        self._exhausted = False
        self._drained = False

    def _fill(self) -> bool:
        if self._exhausted:
            return False
        block = self._stream.read(self._block_size)
        if not block:
            self._exhausted = True
            return False
        self._pending = block
        self._offset = 0
        return True

    def read(self) -> str:
        if self._offset >= len(self._pending) and not self._fill():
            return END_OF_INPUT
        char = self._pending[self._offset]
        self._offset += 1
        return char

    def known_length(self) -> None:
        return None

    def drain_into(self, sink: TextSink) -> None:
        for block in self.iter_chunks():
            sink.write(block)

    def iter_chunks(self) -> Iterator[str]:
        if self._drained:
            raise SourceConsumedError("Stream source has already been consumed and cannot be read twice")
        self._drained = True
        return self._blocks()

    def _blocks(self) -> Iterator[str]:
        if self._offset < len(self._pending):
            yield self._pending[self._offset :]
        self._pending = ""
        self._offset = 0
        while not self._exhausted:
            block = self._stream.read(self._block_size)
            if not block:
                self._exhausted = True
                break
            yield block

    def __repr__(self) -> str:
        state = "consumed" if self._drained else "open"
        return f"StreamSource({state}, block_size={self._block_size})"


SourceInput = Union[str, CharacterSource, ReadableText]


def as_source(value: SourceInput) -> CharacterSource:
    """Return a character source for a string, a stream or an existing source.

    Parameters
    ----------
    value : str, CharacterSource or readable stream
        Input to wrap

    Returns
    -------
    CharacterSource
        ``value`` itself when it already is a source

    Raises
    ------
    TypeError
        If ``value`` is none of the accepted kinds

    """
    if isinstance(value, CharacterSource):
        return value
    if isinstance(value, str):
        return TextSource(value)
    if isinstance(value, ReadableText):
        return StreamSource(value)
    raise TypeError(f"Cannot read characters from {type(value).__name__}")


__all__ = [
    "END_OF_INPUT",
    "TextSink",
    "ReadableText",
    "CharacterSource",
    "TextSource",
    "StreamSource",
    "SourceInput",
    "as_source",
]
