"""structlog processors shared by every splicefs logger"""

import sys

from structlog.types import EventDict, WrappedLogger

_SEVERITIES = {"warn": "WARNING", "exception": "ERROR"}


def add_service_context(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Stamp the service name, version and environment"""
    from splicefs.core.config import get_settings

    settings = get_settings()
    event_dict.setdefault("service", settings.app_name)
    event_dict.setdefault("version", settings.app_version)
    event_dict.setdefault("environment", settings.environment)
    return event_dict


def add_error_details(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Copy ``code`` and ``details`` of a logged splicefs error into the event.

    The traceback itself is left to the renderer.
    """
    exc_info = event_dict.get("exc_info")
    if not exc_info:
        return event_dict

    if isinstance(exc_info, BaseException):
        error = exc_info
    elif isinstance(exc_info, tuple):
        error = exc_info[1]
    else:
        error = sys.exc_info()[1]

    code = getattr(error, "code", None)
    if isinstance(code, str) and code.startswith("SPFS-"):
        event_dict["error_code"] = code
        event_dict["error_details"] = getattr(error, "details", {})
    return event_dict


def set_log_severity(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Upper-case ``severity`` field for log aggregation"""
    level = event_dict.get("level", method_name)
    event_dict["severity"] = _SEVERITIES.get(level, level.upper())
    return event_dict
