"""Logging configuration for box-harness.

Harness events (``run_started``, ``command_executed``, ``scope_drain_failed``,
...) are structlog key-value events routed through the standard library root
logger. Console output is human-readable; a log file is written as JSON lines
unless asked otherwise, so CI jobs can collect the cleanup record of a run.
"""

import logging
import sys
from pathlib import Path

import structlog

# Loggers of the HTTP stack that log every request at INFO
HTTP_LOGGERS = ("httpx", "httpcore")


def _build_handler(log_file: str | Path | None, level: int) -> logging.Handler:
    if log_file:
        handler: logging.Handler = logging.FileHandler(str(log_file), encoding="utf-8")
    else:
        handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    return handler


def configure_logging(
    level: str = "warning",
    log_file: str | Path | None = None,
    json_output: bool | None = None,
) -> None:
    """Configure standard logging and structlog for a harness process.

    Called once, by the pytest plugin (``--box-log-level``, ``--box-log-file``,
    ``--box-log-json``) or by the ``box-harness`` CLI.

    Args:
        level: Log level name; unknown names mean warning
        log_file: Write to this file instead of stderr
        json_output: Render JSON lines. Defaults to True for a log file and
            False for stderr.
    """
    log_level = getattr(logging, level.upper(), None)
    if not isinstance(log_level, int):
        log_level = logging.WARNING
    if json_output is None:
        json_output = log_file is not None

    logging.basicConfig(
        level=log_level,
        handlers=[_build_handler(log_file, log_level)],
        format="%(message)s",
        force=True,
    )
    # Per-request lines from httpx only at debug
    http_level = logging.DEBUG if log_level <= logging.DEBUG else logging.WARNING
    for name in HTTP_LOGGERS:
        logging.getLogger(name).setLevel(http_level)

    processors: list[structlog.types.Processor] = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]
    if json_output:
        processors += [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        # ConsoleRenderer formats exc_info itself
        processors.append(
            structlog.dev.ConsoleRenderer(colors=log_file is None and sys.stderr.isatty())
        )

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)
