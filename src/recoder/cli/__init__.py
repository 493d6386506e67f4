"""Command-line interface for the recoder library.

The main command recodes text through a recipe; ``list-codecs`` and
``explain`` are subcommands recognised by their first argument.

Environment Variable Support
----------------------------
``RECODER_CONFIG`` names a configuration file to use instead of the one
discovered from the working directory. ``--config`` overrides it and
``--no-config`` disables both.

Examples
--------
Recode a literal value::

    $ recoder "URI/UTF8/XML" --text "%3Cb%3E"
    &lt;b&gt;

Indent a file::

    $ recoder 'UTF8/INDENT("    ",1)' notes.txt -o notes.indented.txt

Recode stdin line by line::

    $ tail -f app.log | recoder --stream "UTF8/JSON"

Use a recipe alias from ``.recoder.toml``::

    $ recoder @shout --text fooBar

"""

import argparse
import logging
import os
import sys

from recoder.cli.builder import (
    EXIT_VALIDATION_ERROR,
    create_parser,
    get_exit_code_for_exception,
)
from recoder.cli.commands import dispatch_command
from recoder.cli.config import CONFIG_ENV_VAR, RecoderConfig, load_config_with_priority
from recoder.cli.processors import process_recode
from recoder.exceptions import ConfigError, RecoderError
from recoder.logging_utils import configure_logging, sanitize_for_log

logger = logging.getLogger(__name__)

__all__ = ["main", "create_parser"]


def _setup_logging_level(parsed_args: argparse.Namespace, config: RecoderConfig) -> None:
    """Set up logging level based on command-line arguments and configuration.

    Parameters
    ----------
    parsed_args : argparse.Namespace
        Parsed command-line arguments
    config : RecoderConfig
        Loaded configuration, consulted when no level was given

    """
    # --trace takes highest precedence, then --verbose, then --log-level
    if parsed_args.trace:
        log_level = logging.DEBUG
    elif parsed_args.verbose and parsed_args.log_level is None:
        log_level = logging.DEBUG
    else:
        level_name = parsed_args.log_level or config.log_level or "WARNING"
        log_level = getattr(logging, level_name.upper())

    configure_logging(
        log_level,
        log_file=parsed_args.log_file,
        trace_mode=parsed_args.trace,
        recipe=parsed_args.recipe,
    )


def _load_config(parsed_args: argparse.Namespace) -> RecoderConfig:
    # Check for config from environment (skip if --no-config is set)
    if not parsed_args.no_config and not parsed_args.config:
        env_config = os.environ.get(CONFIG_ENV_VAR)
        if env_config:
            parsed_args.config = env_config
    return load_config_with_priority(explicit_path=parsed_args.config, discover=not parsed_args.no_config)


def main(args: list[str] | None = None) -> int:
    """Execute the recoder command line.

    Parameters
    ----------
    args : list[str], optional
        Command line arguments, defaults to ``sys.argv[1:]``

    Returns
    -------
    int
        Exit code

    """
    command_result = dispatch_command(args)
    if command_result is not None:
        return command_result

    parser = create_parser()
    try:
        parsed_args = parser.parse_args(args)
    except SystemExit as e:
        # argparse exits on --help, --version and usage errors
        return e.code if isinstance(e.code, int) else 0

    if parsed_args.text is not None and parsed_args.input:
        print("Error: --text cannot be combined with input files", file=sys.stderr)
        return EXIT_VALIDATION_ERROR

    try:
        config = _load_config(parsed_args)
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_VALIDATION_ERROR

    _setup_logging_level(parsed_args, config)
    if config.source is not None:
        logger.debug(f"Using configuration from {config.source}")

    try:
        return process_recode(parsed_args, config)
    except (RecoderError, OSError) as e:
        logger.debug(f"Recoding failed: {sanitize_for_log(repr(e))}")
        print(f"Error: {e}", file=sys.stderr)
        return get_exit_code_for_exception(e)
