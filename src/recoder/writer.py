#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/recoder/writer.py
"""Streaming recoding sink.

:class:`RecodingWriter` wraps a downstream text sink and applies one fixed
pipeline to every chunk written to it. The pipeline is composed once, when
the writer is configured; each write then recodes just that chunk, so the
work per write is proportional to the chunk and never to the total amount
written so far. A single :class:`~recoder.state.RecodingTargetState` lives as
long as the writer, which lets line-sensitive codecs such as ``INDENT``
behave as if the whole text had been written at once.

Examples
--------
    >>> import io
    >>> out = io.StringIO()
    >>> with RecodingWriter(out, "UTF8/INDENT(\\">\\",1)", close_downstream=False) as writer:
    ...     writer.writelines(["one\\ntw", "o\\nthree"])
    >>> out.getvalue()
    '>one\\n>two\\n>three'

"""

from __future__ import annotations

import logging
from types import TracebackType
from typing import Iterable, Optional, Type, Union

from recoder.codec_registry import CodecRegistry
from recoder.composer import ComposedRecoding, PipelineInput, compose
from recoder.exceptions import WriterStateError
from recoder.pipeline import RecodingPipeline
from recoder.sources import TextSink, TextSource
from recoder.state import RecodingTargetState

logger = logging.getLogger(__name__)


class RecodingWriter:
    """Text writer recoding everything written to it into ``downstream``.

    Parameters
    ----------
    downstream : TextSink
        Receives the recoded text
    pipeline : RecodingPipeline or str, optional
        Pipeline to apply. When omitted the writer passes text through
        unchanged until :meth:`configure` is called.
    registry : CodecRegistry, optional
        Registry to resolve codecs in. Defaults to the global registry.
    close_downstream : bool, default True
        Whether :meth:`close` also closes ``downstream``

    Notes
    -----
    Chunk boundaries are invisible in the output only when every codec of the
    pipeline is stream-safe. Configuring a pipeline that contains a codec
    which is not logs a warning; each chunk is then recoded on its own.

    """

    def __init__(
        self,
        downstream: TextSink,
        pipeline: Optional[PipelineInput] = None,
        registry: Optional[CodecRegistry] = None,
        close_downstream: bool = True,
    ) -> None:
        self._downstream = downstream
        self._registry = registry
        self._close_downstream = close_downstream
        self._state = RecodingTargetState()
        self._pipeline: Optional[RecodingPipeline] = None
        self._composed: Optional[ComposedRecoding] = None
        self._configured = False
        self._written = False
        self._closed = False
        if pipeline is not None:
            self.configure(pipeline)

    def configure(self, pipeline: PipelineInput) -> None:
        """Set the pipeline applied to every subsequent write.

        Parameters
        ----------
        pipeline : RecodingPipeline or str
            Pipeline, or recipe to parse

        Raises
        ------
        WriterStateError
            If the writer was already configured, has been written to, or is
            closed
        NoTransformAvailableError
            If a transition of the pipeline has no codec

        """
        if self._closed:
            raise WriterStateError("Cannot configure a closed writer")
        if self._configured:
            raise WriterStateError("Writer is already configured")
        if self._written:
            raise WriterStateError("Writer cannot be configured after the first write")

        composed = compose(pipeline, self._registry)
        self._configured = True
        self._pipeline = composed.pipeline
        if composed.is_identity:
            logger.debug(f"Writer pipeline '{composed.pipeline}' is an identity, passing text through")
            return

        self._composed = composed
        unsafe = [codec.name for codec in composed.codecs if not codec.stream_safe]
        if unsafe:
            logger.warning(
                f"Writer pipeline '{composed.pipeline}' uses codec(s) {unsafe} that are not stream-safe; "
                "output depends on how the text is split into writes"
            )
        logger.debug(f"Configured writer with '{composed.pipeline}'")

    @property
    def pipeline(self) -> Optional[RecodingPipeline]:
        """The configured pipeline, or None when not configured."""
        return self._pipeline

    @property
    def is_identity(self) -> bool:
        """Whether written text is passed through unchanged."""
        return self._composed is None

    @property
    def state(self) -> RecodingTargetState:
        return self._state

    @property
    def closed(self) -> bool:
        return self._closed

    def writable(self) -> bool:
        return not self._closed

    def write(self, chunk: str) -> int:
        """Recode ``chunk`` and write the result downstream.

        Returns
        -------
        int
            Number of characters accepted, i.e. ``len(chunk)``

        Raises
        ------
        WriterStateError
            If the writer is closed

        """
        if self._closed:
            raise WriterStateError("Cannot write to a closed writer")
        self._written = True
        if not chunk:
            return 0
        if self._composed is None:
            self._downstream.write(chunk)
        else:
            self._composed(TextSource(chunk), self._downstream, self._state)
        return len(chunk)

    def writelines(self, chunks: Iterable[str]) -> None:
        for chunk in chunks:
            self.write(chunk)

    def flush(self) -> None:
        """Flush the downstream sink if it supports flushing."""
        if self._closed:
            raise WriterStateError("Cannot flush a closed writer")
        flush = getattr(self._downstream, "flush", None)
        if flush is not None:
            flush()

    def close(self) -> None:
        """Close the writer, and the downstream sink unless told otherwise.

        Closing twice has no effect.
        """
        if self._closed:
            return
        self._closed = True
        if self._close_downstream:
            close = getattr(self._downstream, "close", None)
            if close is not None:
                close()
        else:
            flush = getattr(self._downstream, "flush", None)
            if flush is not None:
                flush()

    def __enter__(self) -> RecodingWriter:
        if self._closed:
            raise WriterStateError("Cannot enter a closed writer")
        return self

    def __exit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc_val: Optional[BaseException],
        exc_tb: Optional[TracebackType],
    ) -> None:
        self.close()

    def __repr__(self) -> str:
        recipe: Union[str, None] = self.pipeline.to_recipe() if self.pipeline is not None else None
        return f"RecodingWriter(pipeline={recipe!r}, closed={self._closed})"


__all__ = ["RecodingWriter"]
