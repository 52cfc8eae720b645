"""Structured Logging for shapeguard

structlog routed through the standard library:
- Colored, human-readable console output
- JSON structured output
- Context propagation via contextvars

The library never configures logging on import; applications call
`configure_logging` once at startup.
"""
import logging
import sys

import structlog
from structlog.types import EventDict, Processor


def _add_library_info(
    logger: logging.Logger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Processor that adds library metadata."""
    event_dict.setdefault("library", "shapeguard")
    return event_dict


def get_shared_processors() -> list[Processor]:
    """Processors used in both console and JSON configurations."""
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
        _add_library_info,
    ]


def configure_logging(level: str | None = None, json_logs: bool | None = None) -> None:
    """Configure the logging system.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL). Defaults to settings.
        json_logs: If True, output JSON format. If False, colored console output. Defaults to settings.
    """
    from shapeguard.config import get_settings

    settings = get_settings()
    level = level or settings.LOG_LEVEL
    json_logs = settings.LOG_JSON if json_logs is None else json_logs
    log_level = getattr(logging, level.upper(), logging.INFO)

    shared_processors = get_shared_processors()

    if json_logs:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(
            colors=True,
            exception_formatter=structlog.dev.plain_traceback,
        )

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *shared_processors,
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    library_logger = logging.getLogger("shapeguard")
    library_logger.handlers = [handler]
    library_logger.setLevel(log_level)
    library_logger.propagate = False


def get_logger(name: str = __name__) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance.

    Args:
        name: Logger name, placed under the ``shapeguard`` namespace

    Returns:
        Configured structlog logger
    """
    if not name.startswith("shapeguard"):
        name = f"shapeguard.{name}"
    return structlog.wrap_logger(logging.getLogger(name), wrapper_class=structlog.stdlib.BoundLogger)

