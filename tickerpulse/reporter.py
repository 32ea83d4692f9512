"""Human-readable report output on stdout.

The reporter only prints; it never decides whether the run succeeded.
Diagnostics belong to the logger (stderr / JSON file), not here.
"""

import sys
from typing import TextIO

from tickerpulse.logger import get_logger

log = get_logger(__name__)


class QuoteReporter:
    """Prints status lines and the final quote.

    Attributes:
        stream: Text stream receiving the report (stdout by default).

    Example:
        reporter = QuoteReporter()
        reporter.ticker_valid()
        reporter.ticker("MSFT")
        reporter.price("MSFT", 421.5)
    """

    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream

    @property
    def stream(self) -> TextIO:
        # Resolved lazily so redirected or captured stdout is honored
        return self._stream if self._stream is not None else sys.stdout

    def _emit(self, line: str) -> None:
        print(line, file=self.stream, flush=True)

    def ticker_valid(self) -> None:
        self._emit("ticker valid")

    def ticker(self, ticker: str) -> None:
        self._emit(ticker)

    def fetch_error(self, error: str) -> None:
        self._emit(f"There was an error: {error}")

    def parse_error(self, error: str) -> None:
        self._emit(f"Error creating the document {error}")

    def price(self, ticker: str, price: float) -> None:
        """Print the final line, e.g. ``The price of MSFT is: 421.500000``."""
        self._emit(format_price_line(ticker, price))
        log.debug("Quote reported", ticker=ticker, price=price)


def format_price_line(ticker: str, price: float) -> str:
    return f"The price of {ticker} is: {price:f}"
