# main.py

"""Entry point for carsbg (headless search or interactive chat)."""

import argparse
import asyncio
import logging
import sys

from carsbg.config.logging_config import setup_logging
from carsbg.config.settings import Settings

logger = logging.getLogger("carsbg.main")


def _pages(value: str) -> int:
    """argparse type: an integer page count within the allowed range."""
    try:
        pages = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(
            f"invalid page count: {value!r}"
        ) from exc
    if not Settings.MIN_PAGES <= pages <= Settings.MAX_PAGES:
        raise argparse.ArgumentTypeError(
            f"pages must be between {Settings.MIN_PAGES} "
            f"and {Settings.MAX_PAGES}"
        )
    return pages


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="carsbg",
        description="Search car listings on cars.bg.",
        epilog="Example: carsbg bmw 5-series -p 3 -f table",
    )
    parser.add_argument(
        "brand",
        nargs="?",
        default="",
        help="Car brand, e.g. BMW, Audi, VW (default: all brands).",
    )
    parser.add_argument(
        "model",
        nargs="?",
        default="",
        help="Car model, e.g. 5-series (default: all models).",
    )
    parser.add_argument(
        "-p",
        "--pages",
        type=_pages,
        default=Settings.DEFAULT_PAGES,
        help=(
            f"Result pages to scan, {Settings.MIN_PAGES}-"
            f"{Settings.MAX_PAGES} (default: {Settings.DEFAULT_PAGES})."
        ),
    )
    parser.add_argument(
        "-f",
        "--format",
        choices=["json", "table"],
        default="json",
        dest="output_format",
        help="Output format (default: json).",
    )
    parser.add_argument(
        "--chat",
        action="store_true",
        default=False,
        help="Start an interactive session accepting !cars commands.",
    )
    return parser


def _run_chat() -> None:
    """Launch the interactive chat loop."""
    from carsbg.cli.chat import run_chat

    try:
        exit_code = asyncio.run(run_chat())
    except KeyboardInterrupt:
        exit_code = 0
    finally:
        logger.info("carsbg chat shutting down")
    sys.exit(exit_code)


def _run_cli(args: argparse.Namespace) -> None:
    """Run a headless search and exit."""
    from carsbg.cli.runner import cli_search

    exit_code = asyncio.run(
        cli_search(
            brand=args.brand,
            model=args.model,
            max_pages=args.pages,
            output_format=args.output_format,
        )
    )
    sys.exit(exit_code)


def main() -> None:
    """Route to the chat loop (--chat) or a one-shot search."""
    log_file = setup_logging()
    logger.info("carsbg starting, log file: %s", log_file)

    parser = _build_parser()
    args = parser.parse_args()

    if args.chat:
        _run_chat()
    else:
        _run_cli(args)


if __name__ == "__main__":
    main()
