#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/recoder/api.py
"""High-level recoding functions.

These wrap :func:`recoder.composer.apply_pipeline` for the common cases:
recoding a value through a pipeline, through a recipe string, or along a
single pair of tags.

Examples
--------
    >>> recode_by_string("a<b", "UTF8/XML")
    'a&lt;b'
    >>> recode_pair("fooBar", "MC", "LCU")
    'foo_bar'

"""

from __future__ import annotations

import io
from typing import Optional, Union, cast

from recoder.codec_registry import CodecRegistry
from recoder.composer import PipelineInput, apply_pipeline
from recoder.constants import FormatTag, OptionValue
from recoder.pipeline import RecodingPipeline, RecodingStep, parse_pipeline
from recoder.sources import SourceInput, TextSink
from recoder.state import RecodingTargetState


def recode(
    value: SourceInput,
    pipeline: PipelineInput,
    sink: Optional[TextSink] = None,
    state: Optional[RecodingTargetState] = None,
    registry: Optional[CodecRegistry] = None,
) -> Union[str, TextSink]:
    """Recode a value through a pipeline.

    Parameters
    ----------
    value : str, CharacterSource or readable stream
        Input text
    pipeline : RecodingPipeline or str
        Pipeline, or recipe to parse
    sink : TextSink, optional
        Where to append the result. When omitted, the result is returned
        as a string.
    state : RecodingTargetState, optional
        Line position of the output, for callers that recode one logical
        output in several calls
    registry : CodecRegistry, optional
        Registry to resolve codecs in

    Returns
    -------
    str or TextSink
        The recoded text, or ``sink`` when one was given

    Raises
    ------
    UnknownFormatTagError
        If a recipe names an unknown tag
    NoTransformAvailableError
        If a transition has no codec
    RecodingError
        If a codec cannot recode its input

    """
    if sink is None:
        buffer = io.StringIO()
        apply_pipeline(value, pipeline, buffer, state, registry)
        return buffer.getvalue()
    return apply_pipeline(value, pipeline, sink, state, registry)


def recode_by_string(value: SourceInput, recipe: str, sink: Optional[TextSink] = None) -> Union[str, TextSink]:
    """Recode a value through a recipe such as ``"URI/UTF8/ABBREV(8)"``."""
    return recode(value, parse_pipeline(recipe), sink)


def recode_pair(
    text: SourceInput,
    source_tag: Union[FormatTag, str],
    target_tag: Union[FormatTag, str],
    *options: OptionValue,
) -> str:
    """Recode text along a single pair of tags.

    Parameters
    ----------
    text : str, CharacterSource or readable stream
        Input text
    source_tag : FormatTag or str
        Tag the text is in
    target_tag : FormatTag or str
        Tag to recode to
    *options : int or str
        Options of the target step

    Returns
    -------
    str
        The recoded text

    Examples
    --------
        >>> recode_pair("ab", FormatTag.UTF8, FormatTag.FIXED, 4, "*", "R")
        '**ab'

    """
    source = source_tag if isinstance(source_tag, FormatTag) else FormatTag.from_token(source_tag)
    target = target_tag if isinstance(target_tag, FormatTag) else FormatTag.from_token(target_tag)
    pipeline = RecodingPipeline((RecodingStep(source), RecodingStep(target, options)))
    return cast(str, recode(text, pipeline))


__all__ = ["recode", "recode_by_string", "recode_pair"]
