"""Pytest configuration and shared fixtures for the TickerPulse test suite.

Guarantees:
- No external network requests (httpx.MockTransport everywhere)
- Isolated configuration (lru_cache singleton cleared around each use)
- Logs written under tmp_path only
"""

import io
from pathlib import Path
from typing import Any, Callable, Iterator

import httpx
import pytest
from loguru import logger

from config.settings import GlobalConfig
from tickerpulse.reporter import QuoteReporter


@pytest.fixture
def mock_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[GlobalConfig]:
    """Provide isolated GlobalConfig with safe test defaults.

    Clears the lru_cache singleton before and after the test and points
    every file location at tmp_path.

    Example:
        def test_something(mock_config: GlobalConfig) -> None:
            assert mock_config.environment == "test"
    """
    from config.settings import get_config

    get_config.cache_clear()

    log_dir = tmp_path / "logs"
    log_dir.mkdir()

    test_env = {
        "APP_NAME": "TickerPulse-Test",
        "ENVIRONMENT": "test",
        "DEBUG": "false",
        "LOG_LEVEL": "DEBUG",
        "LOG_DIR": str(log_dir),
        "LOG_ROTATION": "1 day",
        "LOG_RETENTION": "1 day",
        "LOG_TO_FILE": "true",
        "FAILURE_POLICY": "fail_open",
    }

    for key, value in test_env.items():
        monkeypatch.setenv(key, value)
    for key in ("QUOTE_URL_TEMPLATE", "REQUEST_TIMEOUT_SEC", "FOLLOW_REDIRECTS", "USER_AGENTS"):
        monkeypatch.delenv(key, raising=False)

    config = get_config()

    yield config

    get_config.cache_clear()


@pytest.fixture(autouse=True)
def reset_logger() -> Iterator[None]:
    """Drop loguru handlers added by a test so files under tmp_path are released."""
    yield
    logger.remove()


@pytest.fixture
def output() -> io.StringIO:
    """Captured stdout replacement for QuoteReporter."""
    return io.StringIO()


@pytest.fixture
def reporter(output: io.StringIO) -> QuoteReporter:
    return QuoteReporter(stream=output)


@pytest.fixture
def quote_html_factory() -> Callable[..., str]:
    """Factory fixture for generating quote pages.

    Each streamer is a dict with ``symbol``, ``field`` and ``value`` keys;
    a key set to None omits that attribute.

    Example:
        html = quote_html_factory([
            {"symbol": "MSFT", "field": "regularMarketPrice", "value": "421.5"},
        ])
    """

    def _generate_html(streamers: list[dict[str, Any]] | None = None) -> str:
        parts = []
        for streamer in streamers or []:
            attrs = []
            for attr, key in (("data-symbol", "symbol"), ("data-field", "field"), ("value", "value")):
                if streamer.get(key) is not None:
                    attrs.append(f'{attr}="{streamer[key]}"')
            text = streamer.get("value") or ""
            parts.append(f"<fin-streamer {' '.join(attrs)}>{text}</fin-streamer>")

        return f"""
        <!DOCTYPE html>
        <html>
        <head><title>Quote Lookup</title></head>
        <body>
            <section data-testid="quote-price">
                {"".join(parts)}
            </section>
        </body>
        </html>
        """

    return _generate_html


@pytest.fixture
def mock_transport_factory() -> Callable[..., httpx.MockTransport]:
    """Factory for httpx.MockTransport instances that record requests.

    Pass ``body`` and ``status_code`` for a canned response, or ``error``
    to have every request raise that exception.
    """

    def _make(
        body: str = "",
        status_code: int = 200,
        error: Exception | None = None,
        requests: list[httpx.Request] | None = None,
    ) -> httpx.MockTransport:
        def handler(request: httpx.Request) -> httpx.Response:
            if requests is not None:
                requests.append(request)
            if error is not None:
                raise error
            return httpx.Response(
                status_code,
                text=body,
                headers={"Content-Type": "text/html; charset=utf-8"},
            )

        return httpx.MockTransport(handler)

    return _make


def pytest_configure(config: Any) -> None:
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers",
        "integration: marks tests as integration tests requiring full stack",
    )
