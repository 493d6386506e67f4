#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/recoder/metadata.py
"""Metadata classes for codecs.

This module defines the structures codecs are registered with. A
:class:`CodecMetadata` binds a codec function to the ordered pair of format
tags it recodes between and declares the positional options it accepts as
:class:`OptionSpec` entries. Options parsed from a recipe are untyped
(``int`` or ``str``); they are converted and checked against these specs only
when the codec is about to run, and missing options take the declared
defaults.

Examples
--------
Define a codec with one option:

    >>> from recoder.constants import FormatTag
    >>> def repeat(source, sink, state, times):
    ...     sink.write(source.read_remaining() * times)
    >>> METADATA = CodecMetadata(
    ...     source=FormatTag.UTF8,
    ...     target=FormatTag.FIXED,
    ...     func=repeat,
    ...     description="Repeat the input",
    ...     options=[OptionSpec("times", int, default=2, help="Repetitions")],
    ... )

"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Callable, Optional, Sequence, Type

from recoder.constants import FormatTag, OptionValue
from recoder.exceptions import MalformedOptionError
from recoder.sources import CharacterSource, TextSink
from recoder.state import RecodingTargetState

logger = logging.getLogger(__name__)

CodecFunction = Callable[..., None]

_INTEGER_PATTERN = re.compile(r"^\s*[+-]?[0-9]+\s*$")


@dataclass
class OptionSpec:
    """Declaration of one positional codec option.

    Parameters
    ----------
    name : str
        Option name, used as the keyword the codec function receives
    type : type
        Expected Python type, ``int`` or ``str``
    default : Any, optional
        Value used when the recipe omits the option
    help : str, optional
        Help text shown by ``recoder list-codecs``
    choices : list, optional
        Valid values for this option
    validator : callable, optional
        Extra check: takes the converted value, returns bool

    Examples
    --------
    Simple option:
        >>> spec = OptionSpec("limit", int, default=32, help="Maximum length")

    Option with choices:
        >>> spec = OptionSpec("justification", str, default="L", choices=["L", "R", "C"])

    """

    name: str
    type: Type
    default: Any = None
    help: str = ""
    choices: Optional[list[Any]] = None
    validator: Optional[Callable[[Any], bool]] = None

    def convert(self, value: OptionValue) -> Any:
        """Convert a raw recipe value to this option's type.

        Parameters
        ----------
        value : int or str
            Value as parsed from a recipe or given programmatically

        Returns
        -------
        Any
            The converted value

        Raises
        ------
        ValueError
            If the value cannot be converted or fails validation

        """
        if self.type is int:
            if isinstance(value, bool):
                raise ValueError("expected an integer, got a boolean")
            if isinstance(value, int):
                converted: Any = value
            elif isinstance(value, str) and _INTEGER_PATTERN.match(value):
                converted = int(value)
            else:
                raise ValueError("expected an integer")
        elif self.type is str:
            converted = value if isinstance(value, str) else str(value)
        elif isinstance(value, self.type):
            converted = value
        else:
            raise ValueError(f"expected type {self.type.__name__}, got {type(value).__name__}")

        if self.choices is not None and converted not in self.choices:
            raise ValueError(f"must be one of {self.choices}")

        if self.validator is not None and not self.validator(converted):
            raise ValueError("validation failed")

        return converted


@dataclass
class CodecMetadata:
    """Metadata for one codec.

    A codec recodes text from ``source`` to ``target``. Its function is
    called as ``func(source, sink, state, **options)`` and appends its whole
    output to ``sink``.

    Parameters
    ----------
    source : FormatTag
        Tag of the input representation
    target : FormatTag
        Tag of the output representation
    func : callable
        The codec function
    description : str
        Human-readable description
    options : list[OptionSpec], default = empty list
        Positional options, in recipe order
    stream_safe : bool, default = True
        Whether recoding a text in arbitrary chunks, with the state carried
        forward, gives the same output as recoding it in one call
    line_sensitive : bool, default = False
        Whether the codec reads and updates
        :attr:`RecodingTargetState.at_line_start`
    category : str, default = ""
        Grouping shown by ``recoder list-codecs``

    """

    source: FormatTag
    target: FormatTag
    func: CodecFunction
    description: str
    options: list[OptionSpec] = field(default_factory=list)
    stream_safe: bool = True
    line_sensitive: bool = False
    category: str = ""

    def __post_init__(self) -> None:
        """Validate metadata after initialization."""
        if not callable(self.func):
            raise ValueError(f"Codec function for {self.source} -> {self.target} is not callable")

        if self.source is self.target:
            raise ValueError(f"Identity codec {self.source} -> {self.target} cannot be registered")

        names = [spec.name for spec in self.options]
        if len(names) != len(set(names)):
            raise ValueError(f"Duplicate option names for {self.source} -> {self.target}: {names}")

    @property
    def key(self) -> tuple[FormatTag, FormatTag]:
        """Registry key of this codec."""
        return (self.source, self.target)

    @property
    def name(self) -> str:
        """Display name, e.g. ``UTF8->INDENT``."""
        return f"{self.source.value}->{self.target.value}"

    def resolve_options(self, raw_options: Sequence[OptionValue]) -> dict[str, Any]:
        """Map positional recipe options onto this codec's declared options.

        Parameters
        ----------
        raw_options : sequence of int or str
            Options of the target step, in order

        Returns
        -------
        dict[str, Any]
            Keyword arguments for the codec function

        Raises
        ------
        MalformedOptionError
            If an option cannot be converted to its declared type

        """
        resolved: dict[str, Any] = {}
        for index, spec in enumerate(self.options):
            if index < len(raw_options):
                value = raw_options[index]
                try:
                    resolved[spec.name] = spec.convert(value)
                except ValueError as e:
                    raise MalformedOptionError(
                        self.source.value,
                        self.target.value,
                        index,
                        spec.name,
                        value,
                        reason=str(e),
                        original_error=e,
                    ) from e
            else:
                resolved[spec.name] = spec.default

        if len(raw_options) > len(self.options):
            logger.debug(
                f"Codec {self.name} ignores {len(raw_options) - len(self.options)} extra option(s): "
                f"{list(raw_options[len(self.options):])!r}"
            )

        return resolved

    def apply(
        self,
        source: CharacterSource,
        sink: TextSink,
        state: RecodingTargetState,
        raw_options: Sequence[OptionValue] = (),
    ) -> None:
        """Resolve ``raw_options`` and run the codec."""
        options = self.resolve_options(raw_options)
        self.func(source, sink, state, **options)


__all__ = [
    "CodecFunction",
    "OptionSpec",
    "CodecMetadata",
]
