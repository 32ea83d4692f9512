"""Ticker shape validation.

The check is deliberately loose: it looks for a run of 2 to 6 word
characters *anywhere* in the input rather than matching the whole string.
"AAPL" passes, "A" fails, and "averylongtickername" also passes because it
contains a qualifying run. In the default fail-open mode the result is
informational only; strict mode turns it into a gate.
"""

import re

from pydantic import BaseModel, Field

from tickerpulse.exceptions import InvalidTickerError
from tickerpulse.logger import get_logger

log = get_logger(__name__)

TICKER_PATTERN = re.compile(r"\w{2,6}", re.ASCII)


class TickerCheck(BaseModel):
    """Outcome of a ticker shape check.

    Attributes:
        ticker: The ticker exactly as supplied.
        is_valid: Whether the ticker contains a 2-6 word character run.
    """

    ticker: str = Field(..., description="Ticker as supplied on the command line")
    is_valid: bool = Field(..., description="Result of the shape check")


def verify_ticker(ticker: str) -> bool:
    """Return True if ``ticker`` contains a run of 2-6 word characters."""
    return TICKER_PATTERN.search(ticker) is not None


def check_ticker(ticker: str, strict: bool = False) -> TickerCheck:
    """Check the ticker and, in strict mode, reject invalid ones.

    Args:
        ticker: Ticker supplied by the user.
        strict: Raise instead of merely reporting an invalid ticker.

    Returns:
        TickerCheck describing the result.

    Raises:
        InvalidTickerError: If ``strict`` is set and the check fails.
    """
    result = TickerCheck(ticker=ticker, is_valid=verify_ticker(ticker))

    if not result.is_valid:
        log.warning("Ticker failed shape check", ticker=ticker, strict=strict)
        if strict:
            raise InvalidTickerError(ticker)
    else:
        log.debug("Ticker passed shape check", ticker=ticker)

    return result
