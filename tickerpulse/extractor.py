"""Price extraction from quote page markup.

The quote page carries its live values on custom elements such as::

    <fin-streamer data-symbol="MSFT" data-field="regularMarketPrice"
                  value="421.5">421.50</fin-streamer>

Every assumption about that structure lives in QuoteMarkup, so a change in
the page format is a change to one model and nothing else.

Extraction outcomes are kept explicit in PriceReading: a price that is
absent from the page and a price that is present but not numeric are
different readings, even though both are reported as 0.0.
"""

import re
from enum import Enum

from bs4 import BeautifulSoup
from pydantic import BaseModel, ConfigDict
from soupsieve import SelectorSyntaxError

from tickerpulse.exceptions import DocumentParseError
from tickerpulse.logger import get_logger
from tickerpulse.reporter import QuoteReporter

log = get_logger(__name__)

DEFAULT_PRICE = 0.0

# Numeric forms accepted in the value attribute. No surrounding whitespace,
# no digit separators; hex floats need a binary exponent.
_DECIMAL_VALUE = re.compile(
    r"[+-]?(?:(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?|inf(?:inity)?)|nan",
    re.IGNORECASE | re.ASCII,
)
_HEX_VALUE = re.compile(r"[+-]?0x(?:[0-9a-f]+\.?[0-9a-f]*|\.[0-9a-f]+)p[+-]?\d+", re.IGNORECASE | re.ASCII)


class QuoteMarkup(BaseModel):
    """Where the price sits in the quote page.

    Attributes:
        tag: Custom element type carrying quote fields.
        symbol_attr: Attribute holding the ticker symbol.
        field_attr: Attribute naming the data field.
        value_attr: Attribute holding the field value as text.
        price_field: Field name identifying the market price element.
    """

    model_config = ConfigDict(frozen=True)

    tag: str = "fin-streamer"
    symbol_attr: str = "data-symbol"
    field_attr: str = "data-field"
    value_attr: str = "value"
    price_field: str = "regularMarketPrice"


YAHOO_QUOTE_MARKUP = QuoteMarkup()


class ReadingStatus(str, Enum):
    FOUND = "found"
    ABSENT = "absent"
    UNPARSEABLE = "unparseable"


class PriceReading(BaseModel):
    """Result of one extraction.

    Attributes:
        status: FOUND, ABSENT (no price element) or UNPARSEABLE.
        value: Parsed price, only set when status is FOUND.
        raw: Value attribute text of the deciding element, if any.
        matches: Number of elements matching the symbol selector.
    """

    model_config = ConfigDict(frozen=True)

    status: ReadingStatus
    value: float | None = None
    raw: str | None = None
    matches: int = 0

    def as_price(self) -> float:
        """Collapse the reading to the reported price (0.0 unless FOUND)."""
        return self.value if self.value is not None else DEFAULT_PRICE


def build_selector(ticker: str, markup: QuoteMarkup = YAHOO_QUOTE_MARKUP) -> str:
    """Build the CSS selector for elements carrying ``ticker``.

    Example:
        >>> build_selector("MSFT")
        "fin-streamer[data-symbol='MSFT']"
    """
    return f"{markup.tag}[{markup.symbol_attr}='{ticker}']"


def parse_document(html: str) -> BeautifulSoup:
    """Parse ``html`` into a document tree.

    Raises:
        DocumentParseError: If the parser rejects the input.
    """
    try:
        return BeautifulSoup(html, "html.parser")
    except Exception as exc:
        raise DocumentParseError(reason=str(exc) or type(exc).__name__) from exc


def _parse_value(raw: str | None) -> float | None:
    if raw is None:
        return None
    if _DECIMAL_VALUE.fullmatch(raw):
        return float(raw)
    if _HEX_VALUE.fullmatch(raw):
        try:
            return float.fromhex(raw)
        except OverflowError:
            return float("-inf") if raw.startswith("-") else float("inf")
    return None


def read_price(document: BeautifulSoup, ticker: str, markup: QuoteMarkup = YAHOO_QUOTE_MARKUP) -> PriceReading:
    """Read the price for ``ticker`` from a parsed document.

    All matching elements are visited in document order and the last one
    whose field is ``markup.price_field`` decides the reading.
    """
    selector = build_selector(ticker, markup)

    try:
        elements = document.select(selector)
    except SelectorSyntaxError as exc:
        log.warning("Unusable price selector, nothing matched", selector=selector, error=str(exc))
        elements = []

    reading = PriceReading(status=ReadingStatus.ABSENT, matches=len(elements))

    for element in elements:
        if element.get(markup.field_attr) != markup.price_field:
            continue

        raw = element.get(markup.value_attr)
        value = _parse_value(raw)
        log.debug("Price element matched", ticker=ticker, raw=raw)

        reading = PriceReading(
            status=ReadingStatus.FOUND if value is not None else ReadingStatus.UNPARSEABLE,
            value=value,
            raw=raw,
            matches=len(elements),
        )

    log.info(
        "Price extraction complete",
        ticker=ticker,
        selector=selector,
        matches=reading.matches,
        status=reading.status.value,
    )
    return reading


def extract_price(
    html: str,
    ticker: str,
    markup: QuoteMarkup = YAHOO_QUOTE_MARKUP,
    reporter: QuoteReporter | None = None,
    strict: bool = False,
) -> PriceReading:
    """Parse ``html`` and read the price for ``ticker``.

    A document that fails to parse is reported and extraction proceeds
    against an empty document, unless ``strict`` is set.

    Raises:
        DocumentParseError: Only when ``strict`` is set.
    """
    try:
        document = parse_document(html)
    except DocumentParseError as exc:
        if strict:
            raise
        log.error("Quote document could not be parsed", reason=exc.reason)
        (reporter or QuoteReporter()).parse_error(exc.reason)
        document = BeautifulSoup("", "html.parser")

    return read_price(document, ticker, markup)


def find_price(html: str, ticker: str) -> float:
    """Return the price for ``ticker`` in ``html``, or 0.0."""
    return extract_price(html, ticker).as_price()
