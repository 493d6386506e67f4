#  Copyright (c) 2025 Tom Villani, Ph.D.

# src/recoder/cli/commands/codecs.py
"""Codec listing command for the recoder CLI.

This module provides the list-codecs command, which shows the registered
codecs with their options, optionally filtered by source or target tag.
Supports both plain text and rich terminal output.
"""
import argparse
import sys
from itertools import groupby

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from recoder.cli.builder import EXIT_SUCCESS, EXIT_VALIDATION_ERROR
from recoder.codec_registry import codec_registry
from recoder.constants import FormatTag
from recoder.exceptions import UnknownFormatTagError
from recoder.metadata import CodecMetadata, OptionSpec


def _create_list_codecs_parser() -> argparse.ArgumentParser:
    """Create argparse parser for list-codecs command.

    Returns
    -------
    argparse.ArgumentParser
        Configured parser for list-codecs command

    """
    parser = argparse.ArgumentParser(
        prog="recoder list-codecs", description="Show registered codecs.", add_help=True
    )
    parser.add_argument("--source", help="Only codecs recoding from this tag")
    parser.add_argument("--target", help="Only codecs recoding to this tag")
    parser.add_argument("--rich", action="store_true", help="Use rich terminal output")
    return parser


def _format_option(spec: OptionSpec) -> str:
    default = f"={spec.default!r}" if spec.default is not None else ""
    return f"{spec.name}{default}"


def _format_signature(metadata: CodecMetadata) -> str:
    if not metadata.options:
        return metadata.name
    return f"{metadata.name}({', '.join(_format_option(spec) for spec in metadata.options)})"


def _flags(metadata: CodecMetadata) -> str:
    flags = []
    if not metadata.stream_safe:
        flags.append("not stream-safe")
    if metadata.line_sensitive:
        flags.append("line-sensitive")
    return ", ".join(flags)


def _print_rich(codecs: list[CodecMetadata], title: str) -> None:
    console = Console()
    if not codecs:
        console.print(Panel("No codecs match the given tags.", title=title))
        return

    table = Table(title=f"{title} ({len(codecs)})")
    table.add_column("Codec", style="cyan")
    table.add_column("Category", style="yellow")
    table.add_column("Options", style="green")
    table.add_column("Description", style="white")
    table.add_column("Notes", style="magenta")

    for metadata in codecs:
        options = "\n".join(
            f"{_format_option(spec)}: {spec.help}" if spec.help else _format_option(spec) for spec in metadata.options
        )
        table.add_row(metadata.name, metadata.category, options, metadata.description, _flags(metadata))

    console.print(table)


def _print_plain(codecs: list[CodecMetadata], title: str) -> None:
    print(f"\n{title}")
    print("=" * 60)
    ordered = sorted(codecs, key=lambda metadata: (metadata.category, metadata.name))
    for category, members in groupby(ordered, key=lambda metadata: metadata.category):
        print(f"\n{category or 'other'}:")
        for metadata in members:
            flags = _flags(metadata)
            flags_str = f" [{flags}]" if flags else ""
            print(f"  {_format_signature(metadata):40} {metadata.description}{flags_str}")
    print(f"\nTotal: {len(codecs)} codecs")
    print("Use 'recoder explain RECIPE' to see which codecs a recipe uses")


def handle_list_codecs_command(args: list[str] | None = None) -> int:
    """Handle list-codecs command.

    Parameters
    ----------
    args : list[str], optional
        Arguments following ``list-codecs``

    Returns
    -------
    int
        Exit code (0 for success)

    """
    parser = _create_list_codecs_parser()
    try:
        parsed = parser.parse_args(args or [])
    except SystemExit as e:
        # argparse calls sys.exit() on --help or error
        return e.code if isinstance(e.code, int) else 0

    try:
        source = FormatTag.from_token(parsed.source) if parsed.source else None
        target = FormatTag.from_token(parsed.target) if parsed.target else None
    except UnknownFormatTagError as e:
        print(f"Error: {e}", file=sys.stderr)
        print(f"Available tags: {', '.join(tag.value for tag in FormatTag)}", file=sys.stderr)
        return EXIT_VALIDATION_ERROR

    codecs = codec_registry.list_codecs(source=source, target=target)

    title = "Available Codecs"
    if source is not None or target is not None:
        title += f" ({source.value if source else '*'} -> {target.value if target else '*'})"

    if parsed.rich:
        _print_rich(codecs, title)
    else:
        _print_plain(codecs, title)

    return EXIT_SUCCESS


__all__ = ["handle_list_codecs_command"]
