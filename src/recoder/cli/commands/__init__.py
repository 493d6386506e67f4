#  Copyright (c) 2025 Tom Villani, Ph.D.

# src/recoder/cli/commands/__init__.py
"""Subcommand handlers for the recoder CLI.

Subcommands are recognised by their first argument, before the main
parser runs, so a recipe can never be mistaken for one.
"""

import logging
import sys

# Handlers are imported lazily in dispatch_command so that plain recoding
# does not import the rich console machinery.

logger = logging.getLogger(__name__)

SUBCOMMANDS = ("list-codecs", "explain")


def dispatch_command(args: list[str] | None = None) -> int | None:
    """Run a subcommand if the arguments name one.

    Parameters
    ----------
    args : list[str], optional
        Command line arguments, defaults to ``sys.argv[1:]``

    Returns
    -------
    int or None
        Exit code if a subcommand was handled, None otherwise

    """
    if args is None:
        args = sys.argv[1:]

    if not args:
        return None

    if args[0] == "list-codecs":
        from recoder.cli.commands.codecs import handle_list_codecs_command

        return handle_list_codecs_command(args[1:])

    if args[0] == "explain":
        from recoder.cli.commands.explain import handle_explain_command

        return handle_explain_command(args[1:])

    return None


__all__ = ["SUBCOMMANDS", "dispatch_command"]
