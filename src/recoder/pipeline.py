#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/recoder/pipeline.py
"""Recoding steps, pipelines and the recipe parser.

A pipeline is an ordered list of steps. Each step names a format tag and
may carry positional options; a step without a tag is a *barrier*. Text is
transformed along each pair of consecutive non-barrier steps, so a barrier
splits a pipeline into independent segments.

Recipes are the textual form of a pipeline::

    URI/UTF8/ABBREV(8)          decode percent escapes, then truncate
    UTF8/INDENT("  ",2)         indent every line with four blanks
    URI/UTF8//UTF8/ABBREV[8]    same as the first, with a barrier

Steps are separated by ``/``. Options follow the tag in ``(...)`` or
``[...]`` and are separated by ``,``. An option made of digits only is an
integer, an option wrapped in double quotes is text with the quotes
removed, anything else is taken literally. An empty step is a barrier.

Examples
--------
    >>> pipeline = parse_pipeline("URI/UTF8/ABBREV(8)")
    >>> [str(source.tag) + "->" + str(target.tag) for source, target in pipeline.transitions()]
    ['URI->UTF8', 'UTF8->ABBREV']
    >>> pipeline[2].options
    (8,)

"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Iterator, Optional, Sequence, Union, overload

from recoder.constants import (
    OPTION_CLOSERS,
    OPTION_OPENERS,
    OPTION_SEPARATOR,
    STEP_SEPARATOR,
    FormatTag,
    OptionValue,
)
from recoder.exceptions import PipelineSyntaxError
from recoder.logging_utils import sanitize_for_log

logger = logging.getLogger(__name__)

_INTEGER_OPTION = re.compile(r"[0-9]+")
_QUOTED_OPTION = re.compile(r'".*"', re.DOTALL)


@dataclass(frozen=True)
class RecodingStep:
    """One element of a recoding pipeline.

    Parameters
    ----------
    tag : FormatTag or None
        Format tag of this step; None marks a barrier
    options : tuple of int or str, default ()
        Positional options, consumed by the codec recoding *into* this step

    """

    tag: Optional[FormatTag]
    options: tuple[OptionValue, ...] = ()

    def __post_init__(self) -> None:
        if not isinstance(self.options, tuple):
            object.__setattr__(self, "options", tuple(self.options))
        if self.tag is None and self.options:
            raise ValueError("A barrier step cannot carry options")

    @classmethod
    def barrier(cls) -> RecodingStep:
        """Return a barrier step."""
        return cls(None)

    @property
    def is_barrier(self) -> bool:
        return self.tag is None

    def to_recipe(self) -> str:
        """Render this step as a recipe token.

        Text options are always quoted so they read back as text.

        Raises
        ------
        PipelineSyntaxError
            If a text option contains a step or option separator

        """
        if self.tag is None:
            return ""
        if not self.options:
            return self.tag.value
        rendered = []
        for option in self.options:
            if isinstance(option, int):
                rendered.append(str(option))
                continue
            if STEP_SEPARATOR in option or OPTION_SEPARATOR in option:
                raise PipelineSyntaxError(
                    self.tag.value,
                    option,
                    message=f"Option {option!r} of step {self.tag.value} cannot be written as a recipe",
                )
            rendered.append(f'"{option}"')
        return f"{self.tag.value}({OPTION_SEPARATOR.join(rendered)})"

    def __str__(self) -> str:
        return self.to_recipe()


StepLike = Union[RecodingStep, FormatTag, str, None, Sequence[object]]


def _coerce_step(value: StepLike) -> RecodingStep:
    if value is None:
        return RecodingStep.barrier()
    if isinstance(value, RecodingStep):
        return value
    if isinstance(value, FormatTag):
        return RecodingStep(value)
    if isinstance(value, str):
        return RecodingStep(FormatTag.from_token(value)) if value else RecodingStep.barrier()
    if isinstance(value, (tuple, list)) and value:
        head, *options = value
        tag = head if isinstance(head, FormatTag) else FormatTag.from_token(str(head))
        return RecodingStep(tag, tuple(options))
    raise TypeError(f"Cannot build a recoding step from {value!r}")


@dataclass(frozen=True)
class RecodingPipeline:
    """Immutable ordered sequence of :class:`RecodingStep`.

    Parameters
    ----------
    steps : tuple of RecodingStep
        The steps in application order

    Examples
    --------
    Build a pipeline programmatically:

        >>> pipeline = RecodingPipeline.of("UTF8", (FormatTag.INDENT, "  ", 2))
        >>> pipeline.to_recipe()
        'UTF8/INDENT("  ",2)'

    """

    steps: tuple[RecodingStep, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        if not isinstance(self.steps, tuple):
            object.__setattr__(self, "steps", tuple(self.steps))

    @classmethod
    def of(cls, *steps: StepLike) -> RecodingPipeline:
        """Build a pipeline from steps, tags, tag names or ``(tag, *options)`` tuples.

        ``None`` and the empty string denote a barrier.

        Raises
        ------
        UnknownFormatTagError
            If a tag name is not known

        """
        return cls(tuple(_coerce_step(step) for step in steps))

    @classmethod
    def parse(cls, recipe: str) -> RecodingPipeline:
        """Parse a recipe string, see :func:`parse_pipeline`."""
        return parse_pipeline(recipe)

    def transitions(self) -> list[tuple[RecodingStep, RecodingStep]]:
        """Return the pairs of consecutive non-barrier steps.

        Only these pairs are transformed. A pair with equal tags is an
        explicit identity transition.

        """
        pairs = []
        previous: Optional[RecodingStep] = None
        for step in self.steps:
            if step.is_barrier:
                previous = None
                continue
            if previous is not None:
                pairs.append((previous, step))
            previous = step
        return pairs

    @property
    def is_identity(self) -> bool:
        """Whether applying this pipeline leaves the text unchanged."""
        return all(source.tag is target.tag for source, target in self.transitions())

    def to_recipe(self) -> str:
        """Render the pipeline back into recipe form."""
        return STEP_SEPARATOR.join(step.to_recipe() for step in self.steps)

    def __len__(self) -> int:
        return len(self.steps)

    def __iter__(self) -> Iterator[RecodingStep]:
        return iter(self.steps)

    @overload
    def __getitem__(self, index: int) -> RecodingStep: ...

    @overload
    def __getitem__(self, index: slice) -> RecodingPipeline: ...

    def __getitem__(self, index: Union[int, slice]) -> Union[RecodingStep, RecodingPipeline]:
        if isinstance(index, slice):
            return RecodingPipeline(self.steps[index])
        return self.steps[index]

    def __str__(self) -> str:
        return self.to_recipe()


def _parse_option(raw: str) -> OptionValue:
    if _INTEGER_OPTION.fullmatch(raw):
        return int(raw)
    if _QUOTED_OPTION.fullmatch(raw):
        return raw[1:-1]
    return raw


def _find_option_opener(token: str) -> int:
    for opener in OPTION_OPENERS:
        position = token.find(opener)
        if position != -1:
            return position
    return -1


def parse_step(token: str, recipe: Optional[str] = None) -> RecodingStep:
    """Parse one recipe token into a step.

    Parameters
    ----------
    token : str
        A single step, e.g. ``"INDENT(\\"  \\",2)"`` or ``""``
    recipe : str, optional
        Full recipe, used in error messages

    Returns
    -------
    RecodingStep
        The parsed step; a barrier for the empty token

    Raises
    ------
    UnknownFormatTagError
        If the tag is not known
    PipelineSyntaxError
        If an option list is opened but not closed at the end of the token

    """
    if token == "":
        return RecodingStep.barrier()

    opener = _find_option_opener(token)
    if opener == -1:
        return RecodingStep(FormatTag.from_token(token))

    if token[-1] not in OPTION_CLOSERS:
        raise PipelineSyntaxError(recipe if recipe is not None else token, token)

    tag = FormatTag.from_token(token[:opener])
    body = token[opener + 1 : -1]
    # "TAG()" carries no options
    if body == "":
        return RecodingStep(tag)
    options = tuple(_parse_option(raw) for raw in body.split(OPTION_SEPARATOR))
    return RecodingStep(tag, options)


def parse_pipeline(recipe: str) -> RecodingPipeline:
    """Parse a recipe string into a pipeline.

    Every tag is resolved before anything is returned, so an unknown tag
    fails before any text is transformed. The number and types of options
    are not checked here; that happens when the codec consuming them runs.

    Parameters
    ----------
    recipe : str
        Steps separated by ``/``

    Returns
    -------
    RecodingPipeline
        The parsed pipeline

    Raises
    ------
    UnknownFormatTagError
        If a step names an unknown tag
    PipelineSyntaxError
        If a step has an unterminated option list

    Examples
    --------
        >>> parse_pipeline("UTF8/FIXED[10,\\"0\\",R]")[1].options
        (10, '0', 'R')
        >>> parse_pipeline("URI/UTF8//UTF8/XML")[2].is_barrier
        True

    """
    steps = tuple(parse_step(token, recipe) for token in recipe.split(STEP_SEPARATOR))
    logger.debug(f"Parsed recipe '{sanitize_for_log(recipe)}' into {len(steps)} step(s)")
    return RecodingPipeline(steps)


__all__ = [
    "RecodingStep",
    "RecodingPipeline",
    "StepLike",
    "parse_step",
    "parse_pipeline",
]
