#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Recoding of command line inputs.

Inputs are the literal ``--text``, the named files, or stdin. Each input is
recoded in order into a single output, with one
:class:`~recoder.state.RecodingTargetState` shared across inputs so that
line-sensitive codecs see the output as one continuous text.
"""

from __future__ import annotations

import argparse
import contextlib
import io
import logging
import sys
from pathlib import Path
from typing import Iterator, TextIO

from recoder.cli.builder import EXIT_SUCCESS
from recoder.cli.config import RecoderConfig
from recoder.composer import ComposedRecoding, apply_pipeline, compose
from recoder.sources import StreamSource, TextSink, TextSource
from recoder.state import RecodingTargetState
from recoder.writer import RecodingWriter

logger = logging.getLogger(__name__)

STDIN_MARKER = "-"


@contextlib.contextmanager
def _open_input(name: str) -> Iterator[TextIO]:
    if name == STDIN_MARKER:
        yield sys.stdin
        return
    # newline="" keeps line endings as written
    with open(name, "r", encoding="utf-8", newline="") as handle:
        yield handle


@contextlib.contextmanager
def _open_output(path: str | None) -> Iterator[TextIO]:
    """Yield the output sink; a named file is only written after a successful run.

    Output for ``path`` is collected in memory. If recoding raises, the
    exception propagates before the target file is touched.
    """
    if path is None:
        yield sys.stdout
        return

    buffer = io.StringIO()
    yield buffer

    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    with open(target, "w", encoding="utf-8", newline="") as handle:
        handle.write(buffer.getvalue())


def _recode_inputs(
    inputs: list[str],
    composed: ComposedRecoding,
    output: TextSink,
    block_size: int,
) -> None:
    state = RecodingTargetState()
    for name in inputs:
        logger.debug(f"Recoding {'stdin' if name == STDIN_MARKER else name}")
        with _open_input(name) as handle:
            apply_pipeline(StreamSource(handle, block_size=block_size), composed, output, state)


def _stream_inputs(inputs: list[str], composed: ComposedRecoding, output: TextIO) -> None:
    with RecodingWriter(output, composed.pipeline, close_downstream=False) as writer:
        for name in inputs:
            logger.debug(f"Streaming {'stdin' if name == STDIN_MARKER else name} line by line")
            with _open_input(name) as handle:
                for line in handle:
                    writer.write(line)


def process_recode(parsed_args: argparse.Namespace, config: RecoderConfig) -> int:
    """Recode the inputs named on the command line.

    Parameters
    ----------
    parsed_args : argparse.Namespace
        Parsed arguments of the main parser
    config : RecoderConfig
        Loaded configuration

    Returns
    -------
    int
        Exit code

    Raises
    ------
    RecoderError
        If the recipe is invalid or recoding fails
    OSError
        If an input cannot be read or the output cannot be written

    """
    recipe = config.resolve_recipe(parsed_args.recipe)
    # Resolve every codec before touching the output
    composed = compose(recipe)

    inputs = parsed_args.input or [STDIN_MARKER]
    with _open_output(parsed_args.output) as output:
        if parsed_args.text is not None:
            if parsed_args.stream:
                with RecodingWriter(output, composed.pipeline, close_downstream=False) as writer:
                    writer.write(parsed_args.text)
            else:
                apply_pipeline(TextSource(parsed_args.text), composed, output)
        elif parsed_args.stream:
            _stream_inputs(inputs, composed, output)
        else:
            _recode_inputs(inputs, composed, output, config.block_size)
        output.flush()

    if parsed_args.output:
        logger.info(f"Wrote recoded text to {parsed_args.output}")
    return EXIT_SUCCESS


__all__ = ["STDIN_MARKER", "process_recode"]
