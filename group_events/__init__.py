"""group_events - date-windowed, year-grouped event listings for group pages.

The package resolves the date window of an events macro call, collects a
group's events from an injected calendar collaborator and turns them into
display-ready records grouped by year. HTML emission is left to templating.
"""

__version__ = "0.1.0"

from collections.abc import Sequence
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from group_events.calendar.collaborator import CalendarCollaborator
    from group_events.domain.macro import MacroResult


def _init_logging(level_name: Optional[str]) -> None:
    """Initialize root logging to stream to console.

    Honors the GROUP_EVENTS_DEBUG environment variable (truthy values: "1",
    "true", "yes", "on") which forces DEBUG verbosity.
    """
    import logging
    import os
    import sys

    debug_env = os.environ.get("GROUP_EVENTS_DEBUG", "")
    if debug_env.strip().lower() in ("1", "true", "yes", "on"):
        level_name = "DEBUG"

    root = logging.getLogger()
    # Only configure a handler if none are present to avoid duplicate output.
    if not root.handlers:
        from colorlog import ColoredFormatter

        handler = logging.StreamHandler(stream=sys.stderr)
        # HH:MM:SS  LEVEL   logger.name: message, with only the level colorized
        fmt = "%(asctime)s %(log_color)s%(levelname)-7s%(reset)s %(name)s: %(message)s"
        log_colors = {
            "DEBUG": "cyan",
            "INFO": "green",
            "WARNING": "yellow",
            "ERROR": "red",
            "CRITICAL": "bold_red",
        }
        handler.setFormatter(ColoredFormatter(fmt, datefmt="%H:%M:%S", log_colors=log_colors))
        root.addHandler(handler)

    level = logging.INFO
    if isinstance(level_name, str):
        level = getattr(logging, level_name.upper(), logging.INFO)
    root.setLevel(level)
    logging.getLogger(__name__).debug(
        "Logging initialized at level %s", logging.getLevelName(level)
    )


def render_group_events(
    calendar: "CalendarCollaborator",
    args: Sequence[str],
    group_id: int,
    group_cn: Optional[str] = None,
    calendar_id: Optional[int] = None,
) -> "MacroResult":
    """Render the events macro for a group using configuration from the environment.

    Args:
        calendar: Calendar collaborator used to list events
        args: Raw macro arguments, e.g. ["from=today", "for=3 months"]
        group_id: Group identifier
        group_cn: Group short name
        calendar_id: Restrict to one of the group's calendars

    Returns:
        Render result holding either an error message or year groups
    """
    from group_events.calendar.models import Scope
    from group_events.core.config_manager import ConfigManager
    from group_events.domain.macro import EventsMacro

    settings = ConfigManager().load_settings()
    macro = EventsMacro(calendar, settings)
    return macro.render(args, Scope(id=group_id, cn=group_cn), calendar_id=calendar_id)
