# src/boostrunner/telemetry/logger/base.py

import logging
import sys

import structlog
from structlog.typing import FilteringBoundLogger

from boostrunner.telemetry.logger.processors import (
    add_emoji_processor,
    remove_extra_keys_processor,
)

BASE_LOGGER_NAME = "boostrunner"


def _shared_processors() -> list[structlog.types.Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        add_emoji_processor,
        remove_extra_keys_processor,
        structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
    ]


def _console_formatter(json_logs: bool, colors: bool) -> structlog.stdlib.ProcessorFormatter:
    if json_logs:
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer(sort_keys=True)
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=colors)
    return structlog.stdlib.ProcessorFormatter(processor=renderer)


def _file_handler(log_file: str, level: int) -> logging.Handler:
    handler = logging.FileHandler(log_file, encoding="utf-8")
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(processor=structlog.processors.JSONRenderer(sort_keys=True))
    )
    handler.setLevel(level)
    return handler


def setup_logging(
    level: int = logging.INFO,
    json_logs: bool = False,
    log_file: str | None = None,
    file_only: bool = False,
) -> None:
    """
    Route structlog through stdlib logging for every boostrunner command.

    Each CLI invocation calls this again, so existing root handlers are
    replaced rather than stacked. The optional log file always gets JSON.
    """
    structlog.configure(
        processors=_shared_processors(),
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
        handler.close()
        root_logger.removeHandler(handler)
    root_logger.setLevel(level)

    slog = structlog.get_logger(BASE_LOGGER_NAME)

    if not file_only:
        # Run progress and listings own stdout.
        stream = sys.stderr
        console_handler = logging.StreamHandler(stream)
        console_handler.setFormatter(_console_formatter(json_logs, colors=stream.isatty()))
        root_logger.addHandler(console_handler)

    if log_file:
        try:
            root_logger.addHandler(_file_handler(log_file, level))
        except OSError as e:
            slog.error("Cannot open log file, logging to the console only", log_file=log_file, error=str(e))
        else:
            slog.debug("Logging to file", log_file=log_file, emoji_key="path")

    slog.debug(
        "Logging configured",
        log_level=logging.getLevelName(level),
        json_logs=json_logs,
        console=not file_only,
        log_file=log_file,
    )


StructLogger = FilteringBoundLogger

# 🔼⚙️
