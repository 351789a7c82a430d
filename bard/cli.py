"""
CLI entry point for Bard.

    bard --title "The Lighthouse" prepare --seedfile seed.txt
    bard --title "The Lighthouse" -m gpt-4o generate -n 6 --plotfile plots/the-lighthouse.txt
    bard convert --mdfile md/the-lighthouse.md --outputfile the-lighthouse.html
"""

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import List, Mapping, Optional

from rich.console import Console

from .config import (
    DEFAULT_ENV_FILE,
    DEFAULT_MODEL,
    DEFAULT_PARTS,
    DEFAULT_TEMPLATE,
    DEFAULT_TITLE,
    EXIT_FATAL,
    EXIT_SUCCESS,
    MIN_PARTS,
)
from .infra.bootstrap import Readiness, initialize
from .infra.data_paths import (
    get_html_path,
    get_logs_dir,
    get_plot_path,
    get_story_path,
    get_template_path,
    get_work_root,
)
from .infra.logging_config import setup_logging
from .infra.timing import format_elapsed
from .story.converter import convert
from .story.generator import generate_story, prepare_plot
from .story.model_provider import ProviderFactory, ProviderKind
from .story.results import RunResult

logger = logging.getLogger("bard")


def parts_count(value: str) -> int:
    """argparse type for --num_chapters."""
    try:
        parts = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid number of parts: {value!r}")
    if parts < MIN_PARTS:
        raise argparse.ArgumentTypeError(
            f"you have tried to set {parts} parts. Each story must have at least {MIN_PARTS} parts"
        )
    return parts


def report(result: RunResult, console: Console, success_message: str) -> int:
    """
    Print the outcome of a command and map it to an exit code.

    Returns:
        EXIT_SUCCESS or EXIT_FATAL
    """
    if not result.ok:
        console.print(f"Error: {result.error}", style="error", markup=False)
        return EXIT_FATAL

    console.print(
        f"{success_message} in {format_elapsed(result.elapsed_seconds)}",
        style="status",
        markup=False,
    )
    return EXIT_SUCCESS


def cmd_prepare(
    args: argparse.Namespace,
    readiness: Readiness,
    factories: Optional[Mapping[ProviderKind, ProviderFactory]] = None
) -> int:
    """
    Generate the plot for a story from a seed file.

    Returns:
        Exit code
    """
    plot_path = get_plot_path(args.title, readiness.work_root)
    logger.info(f"[CLI] Prepare: seed={args.seedfile}, plot={plot_path}, model={args.model}")

    result = prepare_plot(
        seed_path=Path(args.seedfile),
        plot_path=plot_path,
        model_spec=args.model,
        console=readiness.console,
        factories=factories,
        strict=args.strict_model,
    )
    return report(result, readiness.console, f"Plot {plot_path} generated")


def cmd_generate(
    args: argparse.Namespace,
    readiness: Readiness,
    factories: Optional[Mapping[ProviderKind, ProviderFactory]] = None
) -> int:
    """
    Generate a story from a plot file.

    Returns:
        Exit code
    """
    md_path = get_story_path(args.title, readiness.work_root)
    logger.info(
        f"[CLI] Generate: plot={args.plotfile}, story={md_path}, "
        f"model={args.model}, parts={args.num_parts}"
    )

    result = generate_story(
        plot_path=Path(args.plotfile),
        md_path=md_path,
        model_spec=args.model,
        num_parts=args.num_parts,
        verbose=args.verbose,
        console=readiness.console,
        factories=factories,
        strict=args.strict_model,
    )
    return report(result, readiness.console, f"Story {md_path} generated")


def cmd_convert(args: argparse.Namespace, readiness: Readiness) -> int:
    """
    Convert a markdown story to HTML.

    Returns:
        Exit code
    """
    html_path = get_html_path(args.outputfile, readiness.work_root)
    template_path = get_template_path(args.template, readiness.work_root)
    logger.info(f"[CLI] Convert: md={args.mdfile}, html={html_path}, template={template_path}")

    result = convert(
        md_path=Path(args.mdfile),
        html_path=html_path,
        template_path=template_path,
    )
    return report(result, readiness.console, f"HTML file {html_path} converted")


def create_parser() -> argparse.ArgumentParser:
    """
    Create argument parser.

    Returns:
        Configured ArgumentParser
    """
    parser = argparse.ArgumentParser(
        prog="bard",
        description="Bard - Using AI to create stories",
    )

    parser.add_argument(
        "--title",
        default=DEFAULT_TITLE,
        help=f"Title of the story, used to name output files (default: {DEFAULT_TITLE!r})"
    )
    parser.add_argument(
        "-m", "--model",
        default=DEFAULT_MODEL,
        help=f"Large language model to use: gpt-*, gemini-*, claude-*, or a local Ollama model (default: {DEFAULT_MODEL})"
    )
    parser.add_argument(
        "--strict-model",
        action="store_true",
        help="Reject model names without a known provider prefix instead of using Ollama"
    )
    parser.add_argument(
        "--env-file",
        default=DEFAULT_ENV_FILE,
        help=f"Environment file with API keys (default: {DEFAULT_ENV_FILE})"
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Logging level (default: LOG_LEVEL from environment, or INFO)"
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # prepare command
    prepare_parser = subparsers.add_parser("prepare", help="Prepare a plot for the story")
    prepare_parser.add_argument(
        "--seedfile",
        required=True,
        help="Seed file to use"
    )

    # generate command
    generate_parser = subparsers.add_parser("generate", help="Generate a story")
    generate_parser.add_argument(
        "-n", "--num_chapters", "--num_parts",
        dest="num_parts",
        type=parts_count,
        default=DEFAULT_PARTS,
        help=f"Number of parts, must be at least {MIN_PARTS} (default: {DEFAULT_PARTS})"
    )
    generate_parser.add_argument(
        "--plotfile",
        required=True,
        help="Plot file to use"
    )
    generate_parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Print parts to screen"
    )

    # convert command
    convert_parser = subparsers.add_parser("convert", help="Convert the markdown file to HTML")
    convert_parser.add_argument(
        "--mdfile",
        required=True,
        help="Markdown file to convert"
    )
    convert_parser.add_argument(
        "--outputfile",
        required=True,
        help="Output HTML file name, written to the html/ directory"
    )
    convert_parser.add_argument(
        "--template",
        default=DEFAULT_TEMPLATE,
        help=f"HTML template with a single %%s placeholder (default: {DEFAULT_TEMPLATE})"
    )

    return parser


def main(
    argv: Optional[List[str]] = None,
    console: Optional[Console] = None,
    factories: Optional[Mapping[ProviderKind, ProviderFactory]] = None
) -> int:
    """
    Main entry point.

    Args:
        argv: Command line arguments (default: sys.argv[1:])
        console: Console for progress output (default: themed stdout console)
        factories: Provider construction overrides

    Returns:
        Exit code
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return EXIT_SUCCESS

    work_root = get_work_root()
    log_dir = str(get_logs_dir(work_root))
    setup_logging(args.log_level or os.getenv("LOG_LEVEL", "INFO"), log_dir=log_dir)

    readiness = initialize(work_root=work_root, env_file=args.env_file, console=console)

    # LOG_LEVEL may come from the .env file just loaded
    if args.log_level is None and os.getenv("LOG_LEVEL"):
        setup_logging(os.getenv("LOG_LEVEL"), log_dir=log_dir)

    if not readiness.ready:
        readiness.console.print(f"Error: {readiness.error}", style="error", markup=False)
        return EXIT_FATAL

    if args.command == "prepare":
        return cmd_prepare(args, readiness, factories)
    elif args.command == "generate":
        return cmd_generate(args, readiness, factories)
    elif args.command == "convert":
        return cmd_convert(args, readiness)

    parser.print_help()
    return EXIT_FATAL


if __name__ == "__main__":
    sys.exit(main())
