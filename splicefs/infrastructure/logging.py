import logging
import sys
from typing import Any, List, Optional

import structlog
from structlog.types import Processor

from splicefs.core.config import Settings, get_settings
from splicefs.infrastructure.logging_processors import (
    add_error_details,
    add_service_context,
    set_log_severity,
)

PACKAGE_LOGGER = "splicefs"


def _shared_processors(settings: Settings) -> List[Processor]:
    processors: List[Processor] = [
        structlog.contextvars.merge_contextvars,
        add_service_context,
        structlog.processors.add_log_level,
        set_log_severity,
        add_error_details,
        structlog.processors.TimeStamper(fmt="iso"),
    ]
    if settings.is_development:
        processors.append(
            structlog.processors.CallsiteParameterAdder(
                {
                    structlog.processors.CallsiteParameter.FILENAME,
                    structlog.processors.CallsiteParameter.FUNC_NAME,
                    structlog.processors.CallsiteParameter.LINENO,
                }
            )
        )
    return processors


def setup_logging(settings: Optional[Settings] = None) -> None:
    """Route splicefs logs through structlog to stderr at the configured level"""
    settings = settings or get_settings()
    shared_processors = _shared_processors(settings)

    if settings.log_format == "json":
        renderers: List[Processor] = [
            structlog.processors.dict_tracebacks,
            structlog.processors.JSONRenderer(),
        ]
    else:
        renderers = [structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())]

    structlog.configure(
        processors=[structlog.stdlib.filter_by_level] + shared_processors + [
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta] + renderers,
    )

    # stdout is reserved for command output
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.handlers.clear()
    package_logger.addHandler(handler)
    package_logger.setLevel(getattr(logging, settings.log_level))
    package_logger.propagate = False


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    # Applications that configure structlog themselves keep their setup
    if not structlog.is_configured():
        setup_logging()
    return structlog.get_logger(name)


def bind_context(**kwargs: Any) -> None:
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()


def unbind_context(*keys: str) -> None:
    structlog.contextvars.unbind_contextvars(*keys)
