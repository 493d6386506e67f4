#  Copyright (c) 2025 Tom Villani, Ph.D.

# src/recoder/cli/commands/explain.py
"""Recipe explanation command for the recoder CLI.

``recoder explain RECIPE`` parses a recipe and shows its steps, the
transitions between them and the codec each transition would run,
without recoding anything.
"""
import argparse
import os
import sys

from recoder.cli.builder import EXIT_NO_TRANSFORM_ERROR, EXIT_SUCCESS, get_exit_code_for_exception
from recoder.cli.config import CONFIG_ENV_VAR, load_config_with_priority
from recoder.codec_registry import codec_registry
from recoder.exceptions import RecoderError
from recoder.pipeline import RecodingPipeline, parse_pipeline


def _create_explain_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="recoder explain", description="Show the steps and codecs of a recipe.", add_help=True
    )
    parser.add_argument("recipe", help="Recipe to explain, or @alias from the config file")
    parser.add_argument("--config", help="Configuration file to resolve @alias recipes in")
    parser.add_argument("--no-config", action="store_true", help="Skip configuration file discovery")
    return parser


def _describe(pipeline: RecodingPipeline) -> tuple[list[str], bool]:
    """Render the transitions of a pipeline, one line each.

    Returns the lines and whether every transition has a codec.
    """
    lines = []
    complete = True
    for source, target in pipeline.transitions():
        arrow = f"{source} -> {target}"
        if source.tag is target.tag:
            lines.append(f"  {arrow:36} identity, text is copied")
            continue
        codec = codec_registry.lookup(source.tag, target.tag)
        if codec is None:
            complete = False
            lines.append(f"  {arrow:36} NO CODEC AVAILABLE")
            continue
        line = f"  {arrow:36} {codec.name}: {codec.description}"
        if target.options and codec.options:
            named = ", ".join(
                f"{spec.name}={value!r}" for spec, value in zip(codec.options, target.options)
            )
            line += f" [{named}]"
        lines.append(line)
    return lines, complete


def handle_explain_command(args: list[str] | None = None) -> int:
    """Handle explain command.

    Parameters
    ----------
    args : list[str], optional
        Arguments following ``explain``

    Returns
    -------
    int
        Exit code: 0 when every transition has a codec, 5 when one does not,
        3 when the recipe cannot be parsed

    """
    parser = _create_explain_parser()
    try:
        parsed = parser.parse_args(args or [])
    except SystemExit as e:
        return e.code if isinstance(e.code, int) else 0

    try:
        config = load_config_with_priority(
            explicit_path=parsed.config,
            env_var_path=None if parsed.no_config else os.environ.get(CONFIG_ENV_VAR),
            discover=not parsed.no_config,
        )
        recipe = config.resolve_recipe(parsed.recipe)
        pipeline = parse_pipeline(recipe)
    except RecoderError as e:
        print(f"Error: {e}", file=sys.stderr)
        return get_exit_code_for_exception(e)

    print(f"\nRecipe: {recipe}")
    print("=" * 60)
    print("Steps:")
    for index, step in enumerate(pipeline, start=1):
        print(f"  {index:2}. {step if not step.is_barrier else '(barrier)'}")

    lines, complete = _describe(pipeline)
    print("\nTransitions:")
    if lines:
        for line in lines:
            print(line)
    else:
        print("  none, text is copied unchanged")

    if not complete:
        print("\nThis recipe cannot run: at least one transition has no codec.", file=sys.stderr)
        return EXIT_NO_TRANSFORM_ERROR
    return EXIT_SUCCESS


__all__ = ["handle_explain_command"]
