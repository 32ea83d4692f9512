"""TickerPulse core package.

Components of the quote lookup pipeline, in dependency order:
- cli: command-line input handling
- validator: ticker shape check
- transport: TLS policy and HTTP client construction
- fetcher: quote page retrieval
- extractor: price extraction from the quote page markup
- reporter: human-readable stdout output
- logger: loguru configuration
- exceptions: custom exception hierarchy
"""

__version__ = "1.0.0"
