"""structlog configuration for planbox.

The engine modules log through plain ``logging.getLogger(__name__)``; this
module routes those records through structlog so an embedding application
gets either a console rendering or JSON lines on stderr.
"""

from __future__ import annotations

import logging
import sys

import structlog

from planbox.config.settings import get_settings


def configure_logging(
    *,
    verbose: bool | None = None,
    log_json: bool | None = None,
) -> None:
    """Configure structlog processors and output routing.

    Args:
        verbose: Enable DEBUG-level output for ``planbox``. When False, only WARNING+.
            Defaults to ``PLANBOX_VERBOSE``.
        log_json: Use JSON renderer instead of console renderer.
            Defaults to ``PLANBOX_LOG_JSON``.
    """
    settings = get_settings()
    verbose = settings.verbose if verbose is None else verbose
    log_json = settings.log_json if log_json is None else log_json
    planbox_level = logging.DEBUG if verbose else logging.WARNING

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if log_json:
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(logging.WARNING)

    logging.getLogger("planbox").setLevel(planbox_level)
