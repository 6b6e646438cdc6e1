"""
Central logging configuration for group_events.

Keeps the package loggers at a useful level, stamps every record with the id
of the macro render that produced it, and lets the level be raised through
environment variables for troubleshooting.
"""

import logging
import os
import uuid
from contextvars import ContextVar
from typing import Optional

# Identifier of the macro render currently in progress
render_id_var: ContextVar[str] = ContextVar("render_id", default="")


def new_render_id() -> str:
    """Generate and activate a render id for the current context."""
    render_id = uuid.uuid4().hex[:12]
    render_id_var.set(render_id)
    return render_id


def get_render_id() -> str:
    """Return the active render id, or a placeholder outside of a render."""
    return render_id_var.get() or "no-render-id"


class RenderIdFilter(logging.Filter):
    """Add the render id to all log records."""

    def filter(self, record: logging.LogRecord) -> bool:
        """Add render id to log record.

        Args:
            record: Log record to enhance

        Returns:
            True to allow record to be logged
        """
        record.render_id = get_render_id()
        return True


PACKAGE_LOGGERS = [
    "group_events",
    "group_events.domain",
    "group_events.calendar",
    "group_events.core",
]


def configure_events_logging(
    debug_mode: bool = False,
    force_debug: Optional[bool] = None,
    default_level: int = logging.INFO,
) -> None:
    """
    Configure logging levels for group_events.

    Args:
        debug_mode: Whether to enable debug logging for group_events modules
        force_debug: Override debug mode setting (None to use env var detection)
        default_level: Level for root and package loggers when not debugging

    Environment Variables:
        GROUP_EVENTS_DEBUG: Set to '1', 'true', 'yes' to force debug logging
        GROUP_EVENTS_LOG_LEVEL: Override root log level (DEBUG, INFO, WARNING, ERROR)
    """
    env_debug = os.getenv("GROUP_EVENTS_DEBUG", "").lower() in ("1", "true", "yes")
    env_log_level = os.getenv("GROUP_EVENTS_LOG_LEVEL", "").upper()

    if force_debug is not None:
        final_debug = force_debug
    elif env_debug:
        final_debug = True
    else:
        final_debug = debug_mode

    root_level = logging.DEBUG if final_debug else default_level
    if env_log_level in ("DEBUG", "INFO", "WARNING", "ERROR"):
        root_level = getattr(logging, env_log_level)

    root_logger = logging.getLogger()
    root_logger.setLevel(root_level)

    render_filter = RenderIdFilter()

    # Only add a handler if none exist (preserve setup from __init__.py)
    if not root_logger.handlers:
        handler = logging.StreamHandler()
        handler.setLevel(root_level)
        formatter = logging.Formatter(
            "[%(asctime)s] [%(render_id)s] %(levelname)s - %(name)s - %(message)s"
        )
        handler.setFormatter(formatter)
        handler.addFilter(render_filter)
        root_logger.addHandler(handler)
    else:
        for existing_handler in root_logger.handlers:
            existing_handler.addFilter(render_filter)

    package_level = logging.DEBUG if final_debug else default_level
    for module in PACKAGE_LOGGERS:
        logging.getLogger(module).setLevel(package_level)

    # dateutil parsing is chatty at DEBUG
    logging.getLogger("dateutil").setLevel(logging.WARNING)

    if final_debug:
        root_logger.info("Debug logging enabled for group_events modules.")
    else:
        root_logger.info("Production logging configuration applied.")


def get_logging_status() -> dict[str, str]:
    """
    Get current logging configuration status.

    Returns:
        Dictionary mapping logger names to their current levels
    """
    status = {"root": logging.getLevelName(logging.getLogger().level)}

    for logger_name in PACKAGE_LOGGERS:
        status[logger_name] = logging.getLevelName(logging.getLogger(logger_name).level)

    return status
