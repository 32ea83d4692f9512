"""Command-line input handling.

A missing ``--ticker`` is not an error: the empty string flows downstream
and simply yields an empty lookup.
"""

import argparse
from typing import Sequence

from pydantic import BaseModel

from tickerpulse import __version__


class CliOptions(BaseModel):
    """Options read from the invocation arguments."""

    ticker: str = ""
    strict: bool = False
    log_level: str | None = None


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tickerpulse",
        description="Look up the current market price of a stock ticker.",
    )
    parser.add_argument("--ticker", default="", help="The ticker to look up")
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Halt with a non-zero exit status on an invalid ticker or failed lookup",
    )
    parser.add_argument(
        "--log-level",
        dest="log_level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default=None,
        help="Override the configured diagnostic log level (stderr)",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def parse_args(argv: Sequence[str] | None = None) -> CliOptions:
    """Parse invocation arguments into CliOptions.

    Args:
        argv: Argument list without the program name. Defaults to sys.argv[1:].
    """
    namespace = build_parser().parse_args(argv)
    return CliOptions(
        ticker=namespace.ticker,
        strict=namespace.strict,
        log_level=namespace.log_level,
    )


def read_ticker(argv: Sequence[str] | None = None) -> str:
    """Return the ``--ticker`` value, or an empty string when absent."""
    return parse_args(argv).ticker
