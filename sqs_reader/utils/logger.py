"""Structured logging configuration."""
import logging
import sys
import structlog
from typing import Any, Optional
from .config import Settings, get_settings


def human_readable_renderer(logger, method_name, event_dict):
    """Render log messages in a human-readable format."""
    timestamp = event_dict.pop("timestamp", "")
    level = event_dict.pop("level", "info").upper()
    event = event_dict.pop("event", "")

    level_colors = {
        "INFO": "\033[36m",     # Cyan
        "WARNING": "\033[33m",  # Yellow
        "ERROR": "\033[31m",    # Red
        "DEBUG": "\033[90m",    # Gray
    }
    reset_color = "\033[0m"
    colored_level = f"{level_colors.get(level, '')}{level:8}{reset_color}"

    message_parts = []

    # Just the time, not the full ISO timestamp
    if timestamp:
        time_part = timestamp.split("T")[1][:8] if "T" in timestamp else timestamp[:8]
        message_parts.append(f"[{time_part}]")

    message_parts.append(colored_level)

    if event:
        message_parts.append(f"| {event}")

    important_keys = ["queue", "message_id", "target", "collected", "polls", "state", "error"]
    context_parts = []
    for key, value in event_dict.items():
        if key in important_keys or (key not in ["logger", "exception"] and value):
            if isinstance(value, (int, float)):
                context_parts.append(f"{key}={value}")
            elif isinstance(value, str) and len(value) < 100:
                context_parts.append(f"{key}={value}")

    if context_parts:
        message_parts.append(f"({', '.join(context_parts)})")

    return " ".join(message_parts)


def setup_logging(settings: Optional[Settings] = None, level: Optional[str] = None) -> None:
    """Configure structured logging for the application.

    Log lines go to stderr; stdout is reserved for message output.

    Args:
        settings: Already loaded settings; read from the environment when omitted
        level: Optional level overriding the LOG_LEVEL setting
    """
    settings = settings or get_settings()
    level_name = (level or settings.log_level).upper()

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, level_name, logging.WARNING),
        force=True,
    )

    if settings.log_format.lower() == "human":
        renderer = human_readable_renderer
    else:
        renderer = structlog.processors.JSONRenderer()

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> Any:
    """Get a structured logger instance."""
    return structlog.get_logger(name)
