"""recoder - Recode text between named textual representations.

recoder converts text between representations such as percent-escaped
URIs, XML, JSON string literals, identifier casing styles or indented
blocks, and chains such conversions into pipelines written as compact
recipes like ``URI/UTF8/ABBREV(8)``.

Key Features
------------
- Pipelines described by recipe strings or built programmatically
- Pull-based character sources over strings and unbounded streams
- A streaming writer applying a fixed pipeline to any number of writes
- Line-aware codecs (indentation) that behave the same however the text
  is split into writes
- Codec registry extensible through the ``recoder.codecs`` entry point group

Examples
--------
Recode a value through a recipe:

    >>> from recoder import recode_by_string
    >>> recode_by_string("%3Cb%3E", "URI/UTF8/XML")
    '&lt;b&gt;'

Stream text through a pipeline:

    >>> import sys
    >>> from recoder import RecodingWriter
    >>> with RecodingWriter(sys.stdout, 'UTF8/INDENT("  ",1)', close_downstream=False) as writer:
    ...     _ = writer.write("line one\\nline two\\n")
      line one
      line two

See Also
--------
recoder.pipeline : recipe parsing and pipeline construction
recoder.codec_registry : codec lookup and registration

"""

#  Copyright (c) 2025 Tom Villani, Ph.D.

import sys

if sys.version_info < (3, 10):
    raise ImportError(
        "recoder requires Python 3.10 or later. "
        f"You are using Python {sys.version_info.major}.{sys.version_info.minor}."
    )

__version__ = "0.1.0"

from recoder.api import recode, recode_by_string, recode_pair
from recoder.codec_registry import CodecRegistry, codec_registry
from recoder.composer import ComposedRecoding, apply_pipeline, compose
from recoder.constants import FormatTag
from recoder.exceptions import (
    ConfigError,
    MalformedOptionError,
    NoTransformAvailableError,
    PipelineSyntaxError,
    RecoderError,
    RecodingError,
    SourceConsumedError,
    UnknownFormatTagError,
    ValidationError,
    WriterStateError,
)
from recoder.metadata import CodecMetadata, OptionSpec
from recoder.pipeline import RecodingPipeline, RecodingStep, parse_pipeline
from recoder.sources import CharacterSource, StreamSource, TextSource, as_source
from recoder.state import RecodingTargetState
from recoder.writer import RecodingWriter

__all__ = [
    "__version__",
    # API
    "recode",
    "recode_by_string",
    "recode_pair",
    "apply_pipeline",
    "compose",
    "ComposedRecoding",
    # Pipelines
    "FormatTag",
    "RecodingStep",
    "RecodingPipeline",
    "parse_pipeline",
    # Sources, state and sinks
    "CharacterSource",
    "TextSource",
    "StreamSource",
    "as_source",
    "RecodingTargetState",
    "RecodingWriter",
    # Registry
    "CodecRegistry",
    "codec_registry",
    "CodecMetadata",
    "OptionSpec",
    # Exceptions
    "RecoderError",
    "ValidationError",
    "UnknownFormatTagError",
    "PipelineSyntaxError",
    "MalformedOptionError",
    "NoTransformAvailableError",
    "RecodingError",
    "SourceConsumedError",
    "WriterStateError",
    "ConfigError",
]
