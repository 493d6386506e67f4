#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Argument parser and exit codes for the recoder CLI."""

from __future__ import annotations

import argparse

from recoder import __version__
from recoder.exceptions import (
    ConfigError,
    NoTransformAvailableError,
    RecoderError,
    RecodingError,
    SourceConsumedError,
    ValidationError,
)

EXIT_SUCCESS = 0
EXIT_ERROR = 1
EXIT_VALIDATION_ERROR = 3
EXIT_FILE_ERROR = 4
EXIT_NO_TRANSFORM_ERROR = 5
EXIT_RECODING_ERROR = 6

_EPILOG = """\
recipes:
  Steps are separated by '/', options follow a step in parentheses or
  brackets, and an empty step stops chaining:

    recoder "URI/UTF8/ABBREV(8)" --text "%41%42%43"
    recoder 'UTF8/INDENT("  ",1)' notes.txt -o indented.txt
    recoder @shout --text fooBar        (alias from the configuration file)

subcommands:
  recoder list-codecs [--source TAG] [--target TAG] [--rich]
  recoder explain RECIPE
"""


def create_parser() -> argparse.ArgumentParser:
    """Create the parser for the main ``recoder RECIPE [INPUT ...]`` command.

    Returns
    -------
    argparse.ArgumentParser
        Configured parser

    """
    parser = argparse.ArgumentParser(
        prog="recoder",
        description="Recode text through a pipeline of textual representations.",
        epilog=_EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("recipe", help="Pipeline recipe such as 'URI/UTF8/XML', or @alias from the config file")
    parser.add_argument("input", nargs="*", help="Input files ('-' for stdin). Reads stdin when omitted.")
    parser.add_argument("-o", "--output", help="Write to this file instead of stdout")
    parser.add_argument("--text", help="Recode this literal text instead of reading input files")
    parser.add_argument(
        "--stream",
        action="store_true",
        help="Feed input line by line through a streaming writer instead of recoding each input in one pass",
    )

    logging_group = parser.add_argument_group("logging")
    logging_group.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        type=str.upper,
        default=None,
        help="Logging level (default: WARNING, or log_level from the config file)",
    )
    logging_group.add_argument("--verbose", action="store_true", help="Shortcut for --log-level DEBUG")
    logging_group.add_argument(
        "--trace", action="store_true", help="Debug logging with timestamps, logger names and the recipe"
    )
    logging_group.add_argument("--log-file", help="Also write log records to this file")

    config_group = parser.add_argument_group("configuration")
    config_group.add_argument("--config", help="Configuration file (.toml, .yaml, .yml, .json or pyproject.toml)")
    config_group.add_argument(
        "--no-config", action="store_true", help="Ignore RECODER_CONFIG and skip configuration file discovery"
    )

    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def get_exit_code_for_exception(exception: Exception) -> int:
    """Map an exception to an appropriate CLI exit code.

    Parameters
    ----------
    exception : Exception
        The exception to map to an exit code

    Returns
    -------
    int
        The appropriate exit code for the exception type

    """
    # Unknown tags, malformed recipes and malformed options
    if isinstance(exception, (ValidationError, ConfigError)):
        return EXIT_VALIDATION_ERROR

    if isinstance(exception, NoTransformAvailableError):
        return EXIT_NO_TRANSFORM_ERROR

    if isinstance(exception, RecodingError):
        return EXIT_RECODING_ERROR

    if isinstance(exception, (OSError, SourceConsumedError)):
        return EXIT_FILE_ERROR

    if isinstance(exception, RecoderError):
        return EXIT_ERROR

    return EXIT_ERROR


__all__ = [
    "EXIT_SUCCESS",
    "EXIT_ERROR",
    "EXIT_VALIDATION_ERROR",
    "EXIT_FILE_ERROR",
    "EXIT_NO_TRANSFORM_ERROR",
    "EXIT_RECODING_ERROR",
    "create_parser",
    "get_exit_code_for_exception",
]
