"""Custom exception hierarchy for TickerPulse.

Each exception carries contextual information (ticker, URL, reason) to aid
debugging. Whether an exception halts the run is decided by the configured
FailurePolicy, not by the component that raises it.
"""

from datetime import UTC, datetime
from typing import Any


class TickerPulseError(Exception):
    """Base exception for all TickerPulse errors.

    Attributes:
        message: Human-readable error description.
        context: Optional dictionary with additional debugging information.
        timestamp: UTC timestamp when the exception was raised.
    """

    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:
        self.message = message
        self.context = context or {}
        self.timestamp = datetime.now(UTC)
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format exception message with context for logging."""
        base = f"[{self.timestamp.isoformat()}] {self.message}"
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{base} | Context: {context_str}"
        return base


class InvalidTickerError(TickerPulseError):
    """Raised in strict mode when the ticker fails the shape check."""

    def __init__(self, ticker: str) -> None:
        super().__init__(
            message=f"Ticker '{ticker}' does not look like a ticker symbol",
            context={"ticker": ticker},
        )
        self.ticker = ticker


class FetchError(TickerPulseError):
    """Raised when the quote page cannot be retrieved.

    Covers connection failures, TLS handshake and certificate errors,
    and failures while reading the response body.
    """

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(
            message=f"Fetching '{url}' failed: {reason}",
            context={"url": url, "reason": reason},
        )
        self.url = url
        self.reason = reason


class DocumentParseError(TickerPulseError):
    """Raised when the response body cannot be parsed as a markup document."""

    def __init__(self, reason: str) -> None:
        super().__init__(
            message=f"Failed to parse quote document: {reason}",
            context={"reason": reason},
        )
        self.reason = reason


class LoggingInitializationError(TickerPulseError):
    """Raised when the logging system fails to initialize.

    Blocks startup in strict mode only; a fail-open run falls back to
    stderr logging.
    """

    def __init__(self, log_dir: str, reason: str) -> None:
        super().__init__(
            message=f"Failed to initialize logging at '{log_dir}': {reason}",
            context={"log_dir": log_dir, "reason": reason},
        )
