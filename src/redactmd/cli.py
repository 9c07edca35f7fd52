#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/redactmd/cli.py
"""Command line interface for redactmd.

Usage::

    redactmd redact SOURCE [-o OUT]
    redactmd restore SOURCE REDACTED [-o OUT]

``-`` reads a document from stdin; at most one input may do so. With
``--rich`` (and the optional ``rich`` package) output printed to a terminal
is shown as formatted markdown.
"""

from __future__ import annotations

import argparse
import importlib.util
import logging
import sys
from pathlib import Path
from typing import TextIO, Union

from redactmd import __version__
from redactmd.api import RedactionTransformer
from redactmd.config import load_config_with_priority, parser_options_from_config, renderer_options_from_config
from redactmd.exceptions import (
    DependencyError,
    FileError,
    ParsingError,
    RedactMdError,
    RenderingError,
    RestorationError,
    ValidationError,
)
from redactmd.logging_utils import configure_logging
from redactmd.renderers.base import BaseRenderer

logger = logging.getLogger(__name__)

STDIN_MARKER = "-"

EXIT_SUCCESS = 0
EXIT_ERROR = 1
EXIT_DEPENDENCY_ERROR = 2
EXIT_VALIDATION_ERROR = 3
EXIT_FILE_ERROR = 4
EXIT_PARSING_ERROR = 6
EXIT_RENDERING_ERROR = 7


def get_exit_code_for_exception(exception: Exception) -> int:
    """Map an exception to a CLI exit code.

    Restoration failures share the rendering exit code.
    """
    if isinstance(exception, DependencyError):
        return EXIT_DEPENDENCY_ERROR
    if isinstance(exception, ValidationError):
        return EXIT_VALIDATION_ERROR
    if isinstance(exception, FileError):
        return EXIT_FILE_ERROR
    if isinstance(exception, ParsingError):
        return EXIT_PARSING_ERROR
    if isinstance(exception, (RenderingError, RestorationError)):
        return EXIT_RENDERING_ERROR
    return EXIT_ERROR


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with the ``redact`` and ``restore`` subcommands."""
    parser = argparse.ArgumentParser(
        prog="redactmd",
        description="Redact link and image destinations from markdown and restore them from an edited copy.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--config", help="Configuration file (JSON, TOML or YAML)")
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        type=str.upper,
        help="Logging level (default: from config, REDACTMD_LOG_LEVEL, or WARNING)",
    )
    parser.add_argument("--log-file", help="Also write log messages to this file")
    parser.add_argument(
        "--trace", action="store_true", help="Debug logging with timestamps and logger names"
    )
    parser.add_argument(
        "--rich",
        action="store_true",
        help="Show stdout output as formatted markdown (automatically disabled when output is piped)",
    )
    parser.add_argument("--force-rich", action="store_true", help="Use --rich formatting even when stdout is not a TTY")
    parser.add_argument(
        "--rich-code-theme",
        default="monokai",
        help="Pygments theme for code blocks in --rich output (default: monokai)",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    redact = subparsers.add_parser("redact", help="Replace every link and image with a [N] placeholder")
    redact.add_argument("source", help="Source markdown file, or - for stdin")
    redact.add_argument("-o", "--out", help="Write output to this file instead of stdout")

    restore = subparsers.add_parser("restore", help="Rebuild markdown from a source and its edited redacted copy")
    restore.add_argument("source", help="Source markdown file, or - for stdin")
    restore.add_argument("redacted", help="Redacted markdown file, or - for stdin")
    restore.add_argument("-o", "--out", help="Write output to this file instead of stdout")

    return parser


def _setup_logging(parsed_args: argparse.Namespace, config: dict) -> None:
    """Configure logging; --trace wins over --log-level, which wins over config."""
    if parsed_args.trace:
        log_level: Union[int, str, None] = logging.DEBUG
    else:
        log_level = parsed_args.log_level or config.get("log_level")

    configure_logging(log_level, log_file=parsed_args.log_file, trace_mode=parsed_args.trace)


def check_rich_available() -> bool:
    """Check if the optional Rich library is installed."""
    return importlib.util.find_spec("rich") is not None


def should_use_rich_output(parsed_args: argparse.Namespace, stream: TextIO | None = None) -> bool:
    """Determine if stdout output should be formatted with Rich.

    Rich output is used when ``--rich`` is set and either ``--force-rich`` is
    set or the stream is a TTY.

    Raises
    ------
    DependencyError
        If ``--rich`` is set and Rich is not installed

    """
    if not parsed_args.rich:
        return False

    if not check_rich_available():
        raise DependencyError(
            "rich-output",
            [("rich", ">=13.0")],
            message="Rich output requires the optional 'rich' dependency. Install with: pip install redactmd[rich]",
        )

    if parsed_args.force_rich:
        return True

    isatty = getattr(stream or sys.stdout, "isatty", None)
    return bool(callable(isatty) and isatty())


def _print_rich(markdown_content: str, parsed_args: argparse.Namespace) -> None:
    from rich.console import Console
    from rich.markdown import Markdown

    Console().print(Markdown(markdown_content, code_theme=parsed_args.rich_code_theme))


def _resolve_input(argument: str) -> Union[str, Path]:
    """Return stdin content for ``-`` and a Path otherwise."""
    if argument == STDIN_MARKER:
        return sys.stdin.read()
    return Path(argument)


def _validate_inputs(parsed_args: argparse.Namespace) -> None:
    inputs = [parsed_args.source]
    if parsed_args.command == "restore":
        inputs.append(parsed_args.redacted)

    if inputs.count(STDIN_MARKER) > 1:
        raise ValidationError("At most one input can be read from stdin", parameter_name="redacted")


def _run(parsed_args: argparse.Namespace, config: dict) -> str:
    transformer = RedactionTransformer(
        parser_options=parser_options_from_config(config),
        renderer_options=renderer_options_from_config(config),
    )

    source = _resolve_input(parsed_args.source)
    if parsed_args.command == "redact":
        return transformer.source_to_redacted(source)

    redacted = _resolve_input(parsed_args.redacted)
    return transformer.source_and_redacted_to_markdown(source, redacted)


def main(args: list[str] | None = None) -> int:
    """Run the command line interface.

    Parameters
    ----------
    args : list of str, optional
        Command line arguments, defaults to ``sys.argv[1:]``

    Returns
    -------
    int
        Process exit code

    """
    parser = create_parser()
    parsed_args = parser.parse_args(args)

    try:
        config = load_config_with_priority(parsed_args.config)
    except RedactMdError as e:
        print(f"Error loading configuration: {e}", file=sys.stderr)
        return get_exit_code_for_exception(e)

    _setup_logging(parsed_args, config)

    try:
        _validate_inputs(parsed_args)
        result = _run(parsed_args, config)
        if parsed_args.out:
            BaseRenderer.write_text_output(result + "\n", Path(parsed_args.out))
            logger.info("Wrote %s", parsed_args.out)
        elif should_use_rich_output(parsed_args):
            _print_rich(result, parsed_args)
        else:
            sys.stdout.write(result + "\n")
    except RedactMdError as e:
        logger.debug("Command failed", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return get_exit_code_for_exception(e)

    return EXIT_SUCCESS
