"""
Structlog configuration for structured logging in Symbol Vault.

JSON output (orjson) in production, colored console output in development.
"""

import logging
import sys
from typing import Any, Dict

import orjson
import structlog

SERVICE_NAME = "symbol-vault"


def orjson_serializer(obj: Any, **kwargs) -> str:
    """
    JSON serializer using orjson.

    Args:
        obj: Object to serialize
        **kwargs: Additional arguments (ignored for compatibility)

    Returns:
        JSON string
    """
    # orjson returns bytes, so we decode to string for compatibility
    return orjson.dumps(obj, option=orjson.OPT_UTC_Z).decode()


def add_service_name(logger: Any, method_name: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
    """Add service name to all log entries."""
    event_dict["service"] = SERVICE_NAME
    return event_dict


def add_module_info(logger: Any, method_name: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
    """Copy the bound logger name into a `module` key."""
    logger_name = event_dict.pop("logger_name", None)
    if logger_name:
        event_dict["module"] = logger_name
    return event_dict


def configure_structlog(
    log_level: int = logging.INFO,
    development_mode: bool = False,
) -> None:
    """
    Configure structlog for production or development.

    Args:
        log_level: Logging level to set
        development_mode: Whether to use development-friendly output
    """
    shared_processors = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        add_service_name,
        add_module_info,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]
    if development_mode:
        renderer = structlog.dev.ConsoleRenderer(colors=True)
    else:
        renderer = structlog.processors.JSONRenderer(serializer=orjson_serializer)

    structlog.configure(
        processors=[*shared_processors, renderer],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        context_class=dict,
        cache_logger_on_first_use=True,
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    # Remove all existing handlers to prevent duplicates
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    # structlog already rendered the line, the handler only prints it
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter("%(message)s"))
    root_logger.addHandler(handler)


def get_logger(name: str = None) -> structlog.BoundLogger:
    """
    Get a structlog logger instance.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Bound logger instance
    """
    logger = structlog.get_logger(name)

    # Add logger name to context for module identification
    if name:
        logger = logger.bind(logger_name=name)

    return logger
