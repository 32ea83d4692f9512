"""TickerPulse Entry Point.

This module is the bootstrap and orchestration layer. It contains no
business logic - all functional code resides in the tickerpulse package.

Responsibilities:
    1. Parse invocation arguments
    2. Load configuration and initialize logging
    3. Run the lookup pipeline: validate -> fetch -> extract -> report
    4. Map fatal errors to exit codes (strict mode only)

Usage:
    python main.py --ticker MSFT
    # or, once installed
    tickerpulse --ticker MSFT
"""

import sys
from typing import Sequence

from config.settings import FailurePolicy, GlobalConfig, get_config
from tickerpulse.cli import parse_args
from tickerpulse.exceptions import LoggingInitializationError, TickerPulseError
from tickerpulse.extractor import extract_price
from tickerpulse.fetcher import QuoteFetcher
from tickerpulse.logger import configure_logging, get_logger
from tickerpulse.reporter import QuoteReporter
from tickerpulse.validator import check_ticker

log = get_logger(__name__)


def _run_pipeline(
    config: GlobalConfig,
    ticker: str,
    reporter: QuoteReporter | None = None,
    fetcher: QuoteFetcher | None = None,
) -> int:
    """Execute the lookup pipeline for one ticker.

    In fail-open mode every failure degrades toward a 0.0 price and the
    pipeline returns 0. In strict mode TickerPulseError subclasses propagate.

    Args:
        config: The validated GlobalConfig instance.
        ticker: Ticker symbol from the command line (may be empty).
        reporter: Output sink; defaults to stdout.
        fetcher: Quote fetcher; defaults to one built from ``config``.

    Returns:
        Exit code (always 0 when the pipeline completes).
    """
    reporter = reporter or QuoteReporter()
    fetcher = fetcher or QuoteFetcher(config, reporter=reporter)
    strict = config.is_strict

    log.info(
        "Pipeline execution started",
        app_name=config.app_name,
        ticker=ticker,
        failure_policy=config.failure_policy.value,
    )

    # Phase 1: Validation
    check = check_ticker(ticker, strict=strict)
    if check.is_valid:
        reporter.ticker_valid()
    reporter.ticker(ticker)

    # Phase 2: Fetch
    html = fetcher.fetch_raw(ticker) if strict else fetcher.fetch(ticker)

    # Phase 3: Extraction
    reading = extract_price(html, ticker, reporter=reporter, strict=strict)

    # Phase 4: Report
    reporter.price(ticker, reading.as_price())

    log.info(
        "Pipeline execution completed",
        ticker=ticker,
        status=reading.status.value,
        price=reading.value,
    )
    return 0


def _handle_fatal_error(exc: Exception) -> int:
    """Log a fatal error and return the matching exit code."""
    if isinstance(exc, TickerPulseError):
        log.critical(
            "Fatal application error",
            error_type=type(exc).__name__,
            message=exc.message,
            context=exc.context,
        )
        print(f"ERROR: {exc.message}", file=sys.stderr)
        return 1

    log.exception("Unexpected fatal error", error=str(exc))
    return 1


def main(argv: Sequence[str] | None = None) -> int:
    """Application entry point.

    Args:
        argv: Argument list without the program name. Defaults to sys.argv[1:].

    Returns:
        Exit code (0 for success, non-zero for failure).
    """
    # Step 1: Parse arguments (argparse exits on its own for --help/errors)
    options = parse_args(argv)

    # Step 2: Load configuration (validates via Pydantic)
    try:
        config = get_config()
    except Exception as exc:
        # Cannot log yet - print to stderr
        print(f"FATAL: Configuration loading failed: {exc}", file=sys.stderr)
        return 1

    if options.strict and not config.is_strict:
        config = config.model_copy(update={"failure_policy": FailurePolicy.STRICT})

    # Step 3: Initialize logging (fail-fast in strict mode only)
    try:
        configure_logging(config, level=options.log_level)
    except LoggingInitializationError as exc:
        print(f"FATAL: {exc}", file=sys.stderr)
        return 1

    # Step 4: Execute pipeline
    try:
        return _run_pipeline(config, options.ticker)
    except KeyboardInterrupt:
        log.warning("Pipeline interrupted by user (Ctrl+C)")
        return 130
    except Exception as exc:
        return _handle_fatal_error(exc)


def run() -> None:
    """Console script entry point."""
    sys.exit(main())


if __name__ == "__main__":
    run()
