"""Global configuration management using pydantic-settings.

Values are loaded from environment variables (and an optional .env file)
with strict type validation. The defaults reproduce the stock CLI behavior
exactly, so an empty environment is a fully working configuration.
"""

from enum import Enum
from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_QUOTE_URL_TEMPLATE = "https://finance.yahoo.com/quote/{ticker}?p={ticker}&.tsrc=fin-srch"


class FailurePolicy(str, Enum):
    """How the pipeline reacts to bad input, transport and parse failures.

    FAIL_OPEN reports the problem and keeps going toward a zero price.
    STRICT turns the ticker check into a gate and lets typed errors halt the run.
    """

    FAIL_OPEN = "fail_open"
    STRICT = "strict"


class GlobalConfig(BaseSettings):
    """Centralized configuration with environment variable binding.

    Attributes:
        app_name: Application identifier for logging.
        environment: Deployment environment (development/staging/production).
        debug: Enable verbose tracebacks in log output.
        log_level: Minimum log level for output filtering.
        log_dir: Directory path for structured JSON log files.
        log_rotation: Log file rotation interval.
        log_retention: Log file retention period.
        log_to_file: Write the JSON log file in addition to stderr.
        quote_url_template: Quote page URL with ``{ticker}`` placeholders.
        request_timeout_sec: Network timeout in seconds (None = wait forever).
        follow_redirects: Follow HTTP redirects from the quote host.
        user_agents: User-agent pool; one is picked per client.
        failure_policy: Fail-open (default) or strict error handling.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application Metadata
    app_name: str = Field(default="TickerPulse", description="Application identifier")
    environment: Literal["development", "staging", "production", "test"] = Field(
        default="development", description="Deployment environment"
    )
    debug: bool = Field(default=False, description="Enable debug mode")

    # Logging Configuration
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="WARNING", description="Minimum log level"
    )
    log_dir: Path = Field(default=Path("logs"), description="Log output directory")
    log_rotation: str = Field(default="1 week", description="Log rotation interval")
    log_retention: str = Field(default="1 month", description="Log retention period")
    log_to_file: bool = Field(default=False, description="Enable the JSON file log")

    # Target Configuration
    quote_url_template: str = Field(
        default=DEFAULT_QUOTE_URL_TEMPLATE,
        description="Quote page URL template",
    )

    # Transport
    request_timeout_sec: float | None = Field(
        default=None, gt=0.0, le=600.0, description="Request timeout in seconds"
    )
    follow_redirects: bool = Field(default=True, description="Follow HTTP redirects")
    user_agents: list[str] = Field(
        default=[
            "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
            "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
            "Mozilla/5.0 (Windows NT 10.0; Win64; x64; rv:121.0) Gecko/20100101 Firefox/121.0",
            "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/605.1.15 (KHTML, like Gecko) Version/17.2 Safari/605.1.15",
            "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
        ],
        min_length=1,
        description="User-agent pool",
    )

    # Error Handling
    failure_policy: FailurePolicy = Field(
        default=FailurePolicy.FAIL_OPEN, description="Fail-open or strict pipeline"
    )

    @field_validator("log_dir", mode="before")
    @classmethod
    def ensure_path(cls, value: str | Path) -> Path:
        """Convert string paths to Path objects."""
        return Path(value) if isinstance(value, str) else value

    @field_validator("quote_url_template")
    @classmethod
    def validate_template(cls, value: str) -> str:
        """Require at least one ticker placeholder in the URL template."""
        if "{ticker}" not in value:
            raise ValueError("quote_url_template must contain a '{ticker}' placeholder")
        if not value.startswith("https://"):
            raise ValueError("quote_url_template must use https")
        return value

    @property
    def is_strict(self) -> bool:
        """True when failures should halt the pipeline."""
        return self.failure_policy is FailurePolicy.STRICT


@lru_cache(maxsize=1)
def get_config() -> GlobalConfig:
    """Retrieve the singleton GlobalConfig instance.

    Returns:
        GlobalConfig: The validated configuration instance.
    """
    return GlobalConfig()
