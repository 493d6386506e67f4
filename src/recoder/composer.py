#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/recoder/composer.py
"""Pipeline composition and application.

:func:`compose` turns a :class:`~recoder.pipeline.RecodingPipeline` into a
:class:`ComposedRecoding`: every transition is resolved against the codec
registry up front, so a missing codec is reported before any output is
produced. Applying the composed recoding runs the transitions in order:

- every transition except the last writes into a private buffer whose
  content becomes the input of the next transition;
- the last transition writes straight into the caller's sink;
- identity transitions (equal tags) are skipped, and a pipeline with no
  remaining transition copies its input to the sink in bulk.

Only the terminal sink ever receives output, and it receives exactly the
output of the last transition. Intermediate stages are fully materialized,
so every extra stage costs one pass over the text.

Every stage of one application sees the same
:class:`~recoder.state.RecodingTargetState`. A line-sensitive stage that
is not the last one therefore leaves its line position to the stages after
it: ``'UTF8/INDENT(">",1)//UTF8/INDENT("#",1)'`` turns ``"a\\nb"`` into
``'>a\\n#>b'``, since the second indent starts where the first one stopped,
in the middle of a line.

Examples
--------
    >>> apply_pipeline("%41%20b", "URI/UTF8/XML").getvalue()
    'A b'

"""

from __future__ import annotations

import io
import logging
from dataclasses import dataclass
from typing import Optional, Union

from recoder.codec_registry import CodecRegistry, codec_registry
from recoder.metadata import CodecMetadata
from recoder.pipeline import RecodingPipeline, RecodingStep, parse_pipeline
from recoder.sources import CharacterSource, SourceInput, TextSink, TextSource, as_source
from recoder.state import RecodingTargetState

logger = logging.getLogger(__name__)

PipelineInput = Union[RecodingPipeline, str]


@dataclass(frozen=True)
class ResolvedTransition:
    """A transition between two steps together with the codec running it.

    ``codec`` is None for an identity transition.
    """

    source: RecodingStep
    target: RecodingStep
    codec: Optional[CodecMetadata]

    @property
    def is_identity(self) -> bool:
        return self.codec is None

    @property
    def name(self) -> str:
        return f"{self.source.tag}->{self.target.tag}"

    def run(self, source: CharacterSource, sink: TextSink, state: RecodingTargetState) -> None:
        """Recode everything remaining in ``source`` into ``sink``."""
        if self.codec is None:
            source.drain_into(sink)
            return
        self.codec.apply(source, sink, state, self.target.options)


class ComposedRecoding:
    """A pipeline bound to the codecs that implement its transitions.

    Instances are created by :func:`compose` and can be applied any number
    of times; they keep no per-application state.

    Parameters
    ----------
    pipeline : RecodingPipeline
        The pipeline this recoding was composed from
    transitions : list of ResolvedTransition
        Resolved transitions, in order

    """

    def __init__(self, pipeline: RecodingPipeline, transitions: list[ResolvedTransition]) -> None:
        self._pipeline = pipeline
        self._transitions = tuple(transitions)
        self._active = tuple(transition for transition in transitions if not transition.is_identity)

    @property
    def pipeline(self) -> RecodingPipeline:
        return self._pipeline

    @property
    def transitions(self) -> tuple[ResolvedTransition, ...]:
        """All transitions, identity transitions included."""
        return self._transitions

    @property
    def codecs(self) -> tuple[CodecMetadata, ...]:
        """Codecs that actually run, in order."""
        return tuple(transition.codec for transition in self._active if transition.codec is not None)

    @property
    def is_identity(self) -> bool:
        """Whether applying this recoding copies its input unchanged."""
        return not self._active

    @property
    def stream_safe(self) -> bool:
        """Whether chunked application gives the same output as one call."""
        return all(codec.stream_safe for codec in self.codecs)

    @property
    def line_sensitive(self) -> bool:
        return any(codec.line_sensitive for codec in self.codecs)

    def __call__(self, source: SourceInput, sink: TextSink, state: RecodingTargetState) -> None:
        """Apply the recoding to ``source``, appending the result to ``sink``.

        Parameters
        ----------
        source : str, CharacterSource or readable stream
            Input text
        sink : TextSink
            Terminal sink; only the final transition writes to it
        state : RecodingTargetState
            Line position of the output stream, threaded through every codec

        """
        current = as_source(source)
        if not self._active:
            current.drain_into(sink)
            return

        last = len(self._active) - 1
        for index, transition in enumerate(self._active):
            if index == last:
                transition.run(current, sink, state)
                return
            buffer = io.StringIO()
            transition.run(current, buffer, state)
            current = TextSource(buffer.getvalue())

    def __repr__(self) -> str:
        return f"ComposedRecoding({self._pipeline.to_recipe()!r}, transitions={len(self._active)})"


def _as_pipeline(pipeline: PipelineInput) -> RecodingPipeline:
    if isinstance(pipeline, RecodingPipeline):
        return pipeline
    if isinstance(pipeline, str):
        return parse_pipeline(pipeline)
    raise TypeError(f"Expected a RecodingPipeline or a recipe string, got {type(pipeline).__name__}")


def compose(pipeline: PipelineInput, registry: Optional[CodecRegistry] = None) -> ComposedRecoding:
    """Resolve every transition of a pipeline against the codec registry.

    Parameters
    ----------
    pipeline : RecodingPipeline or str
        Pipeline, or a recipe to parse
    registry : CodecRegistry, optional
        Registry to resolve codecs in. Defaults to the global registry.

    Returns
    -------
    ComposedRecoding
        Callable applying the pipeline

    Raises
    ------
    UnknownFormatTagError
        If a recipe names an unknown tag
    NoTransformAvailableError
        If a non-identity transition has no registered codec

    """
    pipeline = _as_pipeline(pipeline)
    registry = registry if registry is not None else codec_registry

    resolved = []
    for source_step, target_step in pipeline.transitions():
        if source_step.tag is target_step.tag:
            resolved.append(ResolvedTransition(source_step, target_step, None))
            continue
        codec = registry.get_codec(source_step.tag, target_step.tag)
        resolved.append(ResolvedTransition(source_step, target_step, codec))

    composed = ComposedRecoding(pipeline, resolved)
    logger.debug(
        f"Composed '{pipeline.to_recipe()}' into {len(composed.codecs)} codec(s): "
        f"{[codec.name for codec in composed.codecs]}"
    )
    return composed


def apply_pipeline(
    source: SourceInput,
    pipeline: Union[PipelineInput, ComposedRecoding],
    sink: Optional[TextSink] = None,
    state: Optional[RecodingTargetState] = None,
    registry: Optional[CodecRegistry] = None,
) -> TextSink:
    """Apply a pipeline to one input.

    Parameters
    ----------
    source : str, CharacterSource or readable stream
        Input text
    pipeline : RecodingPipeline, str or ComposedRecoding
        What to apply
    sink : TextSink, optional
        Terminal sink. A fresh ``io.StringIO`` is used when omitted.
    state : RecodingTargetState, optional
        Line position of the output stream. A fresh state, at the start of
        a line, is used when omitted.
    registry : CodecRegistry, optional
        Registry to resolve codecs in

    Returns
    -------
    TextSink
        The terminal sink

    Raises
    ------
    NoTransformAvailableError
        If a transition has no codec; raised before anything is written

    """
    composed = pipeline if isinstance(pipeline, ComposedRecoding) else compose(pipeline, registry)
    terminal = sink if sink is not None else io.StringIO()
    composed(source, terminal, state if state is not None else RecodingTargetState())
    return terminal


__all__ = [
    "PipelineInput",
    "ResolvedTransition",
    "ComposedRecoding",
    "compose",
    "apply_pipeline",
]
