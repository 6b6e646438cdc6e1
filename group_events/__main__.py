"""Command-line entry for group_events.

Renders one events macro call against a JSON file of calendar events and
prints the year-grouped records as JSON.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import NoReturn, Optional

from . import _init_logging
from .calendar.collaborator import InMemoryCalendar
from .calendar.models import Scope
from .core.config_manager import ConfigManager
from .domain.macro import EventsMacro, add_event_path
from .events_logging import configure_events_logging

# Exit code when the macro rejects its arguments
EXIT_MACRO_ERROR = 2


def _create_parser() -> argparse.ArgumentParser:
    """Create argument parser for the group_events CLI.

    Returns:
        Configured argument parser
    """
    parser = argparse.ArgumentParser(
        prog="group-events",
        description="Render a group events macro call against a JSON event file",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  group-events events.json --group 1042 from=2025-01-01 "for=3 months"
  group-events events.json --group 1042 from=today to=2025-12-31
  group-events --describe
        """,
    )

    parser.add_argument("events_file", nargs="?", type=Path, help="JSON list of raw events")
    parser.add_argument("macro_args", nargs="*", help="Macro arguments such as from=today")
    parser.add_argument("--group", type=int, metavar="ID", help="Group id (gidNumber)")
    parser.add_argument("--group-cn", metavar="CN", help="Group short name")
    parser.add_argument("--calendar", type=int, metavar="ID", help="Restrict to one calendar")
    parser.add_argument("--describe", action="store_true", help="Print macro usage and exit")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    parser.add_argument("--env-file", type=Path, help="Path to a .env file (default ./.env)")

    return parser


def main(argv: Optional[list[str]] = None) -> NoReturn:
    """Run the group_events CLI."""
    parser = _create_parser()
    args = parser.parse_args(argv)

    # JSON goes to stdout; stderr only carries warnings unless debugging
    _init_logging("DEBUG" if args.debug else "WARNING")
    configure_events_logging(debug_mode=args.debug, default_level=logging.WARNING)

    if args.describe:
        print(EventsMacro.description())
        sys.exit(0)

    if args.events_file is None:
        parser.error("events_file is required")

    calendar = InMemoryCalendar.from_json_file(args.events_file)
    settings = ConfigManager(args.env_file).load_settings()
    macro = EventsMacro(calendar, settings)

    scope = Scope(id=args.group, cn=args.group_cn) if args.group is not None else None
    result = macro.render(args.macro_args, scope, calendar_id=args.calendar)

    if result.error:
        print(result.error, file=sys.stderr)
        sys.exit(EXIT_MACRO_ERROR)

    output = result.to_dict()
    if result.is_empty and scope is not None:
        output["add_event_path"] = add_event_path(scope)

    print(json.dumps(output, indent=2))
    sys.exit(0)


if __name__ == "__main__":
    main()
