"""Quote page retrieval.

One synchronous GET per run. ``fetch_raw`` surfaces transport failures as
FetchError; ``fetch`` applies the fail-open policy and degrades to an empty
body so the rest of the pipeline still runs to a zero price.
"""

import httpx

from config.settings import GlobalConfig, get_config
from tickerpulse.exceptions import FetchError
from tickerpulse.logger import get_logger
from tickerpulse.reporter import QuoteReporter
from tickerpulse.transport import TLSPolicy, build_client

log = get_logger(__name__)


def build_quote_url(ticker: str, template: str | None = None) -> str:
    """Substitute ``ticker`` into both slots of the quote URL template.

    The ticker is inserted as-is, without URL escaping.

    Example:
        >>> build_quote_url("MSFT")
        'https://finance.yahoo.com/quote/MSFT?p=MSFT&.tsrc=fin-srch'
    """
    template = template or get_config().quote_url_template
    return template.replace("{ticker}", ticker)


class QuoteFetcher:
    """Fetches the raw quote page for a ticker.

    Attributes:
        config: GlobalConfig instance for runtime configuration.
        policy: TLS policy for the client (None = default policy).
        reporter: Reporter that prints user-facing error lines.

    Example:
        fetcher = QuoteFetcher()
        html = fetcher.fetch("MSFT")
    """

    def __init__(
        self,
        config: GlobalConfig | None = None,
        policy: TLSPolicy | None = None,
        reporter: QuoteReporter | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.config = config or get_config()
        self.policy = policy
        self.reporter = reporter or QuoteReporter()
        self._transport = transport

    def url_for(self, ticker: str) -> str:
        return build_quote_url(ticker, self.config.quote_url_template)

    def fetch_raw(self, ticker: str) -> str:
        """Fetch the quote page, raising on transport failure.

        The client and the response stream are closed on every exit path.

        Args:
            ticker: Ticker symbol, substituted into the URL unescaped.

        Returns:
            The full response body decoded as text, whatever the HTTP status.

        Raises:
            FetchError: On connection, TLS, timeout or body read failures.
        """
        url = self.url_for(ticker)
        log.info("Fetching quote page", ticker=ticker, url=url)

        try:
            with build_client(self.config, self.policy, self._transport) as client:
                with client.stream("GET", url) as response:
                    response.read()
                    status_code = response.status_code
                    body = response.text
        except httpx.InvalidURL as exc:
            raise FetchError(url=url, reason=f"Invalid URL: {exc}") from exc
        except httpx.HTTPError as exc:
            raise FetchError(url=url, reason=str(exc) or type(exc).__name__) from exc
        except OSError as exc:
            # ssl.SSLError from context construction lands here
            raise FetchError(url=url, reason=str(exc)) from exc
        except UnicodeError as exc:
            # undecodable argv bytes reach the URL as lone surrogates
            raise FetchError(url=url, reason=f"Invalid URL: {exc}") from exc

        if status_code >= 400:
            log.warning("Quote page returned an error status", url=url, status_code=status_code)
        else:
            log.info("Quote page fetched", url=url, status_code=status_code, size=len(body))

        return body

    def fetch(self, ticker: str) -> str:
        """Fetch the quote page, reporting failures and returning "" instead."""
        try:
            return self.fetch_raw(ticker)
        except FetchError as exc:
            log.error("Quote fetch failed", url=exc.url, reason=exc.reason)
            self.reporter.fetch_error(exc.reason)
            return ""
