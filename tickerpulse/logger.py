"""Structured logging configuration using loguru.

Diagnostics always go to stderr; stdout is reserved for the quote report.
A rotating single-line JSON file log is opt-in (``LOG_TO_FILE=true``).

An unusable log directory only stops a strict run. A fail-open run keeps
its stderr diagnostics, drops the file sink and carries on to the price.
"""

import json
import sys
from pathlib import Path
from typing import Any

from loguru import logger

from config.settings import GlobalConfig, get_config
from tickerpulse.exceptions import LoggingInitializationError

CONSOLE_FORMAT = (
    "<green>{time:HH:mm:ss.SSS}</green> "
    "<level>{level: <8}</level> "
    "<cyan>{extra[module]}</cyan> - "
    "<level>{message}</level>"
)

LOG_FILE_NAME = "tickerpulse_{time:YYYY-MM-DD}.json"


def _record_to_json(record: dict[str, Any]) -> str:
    """Render one loguru record as a JSON line.

    Bound keyword context (ticker, url, status_code, ...) is nested under
    ``context``; the internal ``serialized`` slot is left out.
    """
    entry: dict[str, Any] = {
        "timestamp": record["time"].isoformat(),
        "level": record["level"].name,
        "message": record["message"],
        "source": f'{record["name"]}:{record["function"]}:{record["line"]}',
    }

    context = {key: value for key, value in record["extra"].items() if key != "serialized"}
    if context:
        entry["context"] = context

    exception = record["exception"]
    if exception is not None and exception.type is not None:
        entry["exception"] = f"{exception.type.__name__}: {exception.value}"

    return json.dumps(entry, default=str) + "\n"


def _attach_json_line(record: dict[str, Any]) -> bool:
    record["extra"]["serialized"] = _record_to_json(record)
    return True


def _prepare_log_directory(log_dir: Path) -> None:
    """Create ``log_dir`` and prove it accepts writes.

    Raises:
        LoggingInitializationError: The directory cannot be created or written.
    """
    probe = log_dir / ".tickerpulse_write_check"
    try:
        log_dir.mkdir(parents=True, exist_ok=True)
        probe.touch()
        probe.unlink()
    except OSError as exc:
        raise LoggingInitializationError(log_dir=str(log_dir), reason=str(exc)) from exc


def _add_file_sink(config: GlobalConfig, level: str) -> None:
    _prepare_log_directory(config.log_dir)

    logger.add(
        str(config.log_dir / LOG_FILE_NAME),
        format="{extra[serialized]}",
        level=level,
        rotation=config.log_rotation,
        retention=config.log_retention,
        compression="gz",
        filter=_attach_json_line,
    )


def configure_logging(
    config: GlobalConfig | None = None,
    level: str | None = None,
    fail_fast: bool | None = None,
) -> None:
    """Initialize the logging infrastructure.

    Args:
        config: Optional GlobalConfig instance. If None, uses singleton.
        level: Optional level overriding ``config.log_level``.
        fail_fast: Raise when the file sink cannot be set up. Defaults to
            ``config.is_strict``; otherwise the file sink is skipped with a
            warning on stderr.

    Raises:
        LoggingInitializationError: If ``fail_fast`` and the log directory
            is unusable.
    """
    if config is None:
        config = get_config()
    level = level or config.log_level
    if fail_fast is None:
        fail_fast = config.is_strict

    logger.remove()
    logger.configure(extra={"module": "tickerpulse"})
    logger.add(
        sys.stderr,
        format=CONSOLE_FORMAT,
        level=level,
        colorize=True,
        backtrace=config.debug,
        diagnose=config.debug,
    )

    file_logging = config.log_to_file
    if file_logging:
        try:
            _add_file_sink(config, level)
        except LoggingInitializationError as exc:
            if fail_fast:
                raise
            file_logging = False
            logger.warning("{message}; continuing with stderr logging only", message=exc.message)

    logger.debug(
        "Logging infrastructure initialized",
        app_name=config.app_name,
        environment=config.environment,
        log_level=level,
        log_to_file=file_logging,
    )


def get_logger(name: str) -> "logger":
    """Get a logger bound with the module name.

    Example:
        >>> log = get_logger(__name__)
        >>> log.info("Quote fetched", ticker="MSFT")
    """
    return logger.bind(module=name)
