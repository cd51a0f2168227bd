import logging
import sys

import structlog
from structlog.types import Processor


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)  # type: ignore [no-any-return]


def configure_logging(
    log_level: str = "INFO",
    json_logs: bool = True,
) -> None:
    """
    Configure structlog on top of stdlib logging for the whole process.

    :param log_level: Logging level [DEBUG, INFO, WARNING, ERROR, CRITICAL]
    :param json_logs: Render JSON lines instead of the coloured console format
    """
    log_level_int = getattr(logging, log_level.upper())

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=log_level_int,
        force=True,
    )

    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
        structlog.processors.format_exc_info,
    ]

    if json_logs:
        renderer: Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())

    structlog.configure(
        processors=shared_processors + [renderer],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


configure_logging()
