"""Configuration management for the group events macro."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field

from group_events.core.timezone_utils import get_default_timezone

logger = logging.getLogger(__name__)


def parse_env_file(path: Path) -> dict[str, str]:
    """Parse a .env file and return key-value pairs.

    Args:
        path: Path to .env file

    Returns:
        Dictionary of key-value pairs from the .env file.
        Empty dict if file doesn't exist or cannot be read.

    Note:
        - Skips empty lines and comments (lines starting with #)
        - Strips quotes (both single and double) from values
        - Handles KEY=VALUE format with optional whitespace
    """
    if not path.exists():
        return {}

    result: dict[str, str] = {}

    try:
        content = path.read_text(encoding="utf-8")
    except OSError:
        logger.debug("Failed to read .env file (continuing): %s", str(path), exc_info=True)
        return result

    for raw_line in content.splitlines():
        line = raw_line.strip()

        if not line or line.startswith("#"):
            continue

        if "=" not in line:
            continue

        key, val = line.split("=", 1)
        key = key.strip()
        val = val.strip().strip('"').strip("'")

        if key:
            result[key] = val

    return result


# Visible characters kept in an event description before it is cut
DEFAULT_ABOUT_MAX_CHARS = 255
DEFAULT_DURATION = "1 year"
DEFAULT_OPEN_ENDED_LABEL = "(heat death of the universe)"
DEFAULT_ALL_DAY_LABEL = "All day"


class MacroSettings(BaseModel):
    """Runtime settings for the group events macro."""

    timezone: str = Field(
        default_factory=get_default_timezone, description="IANA timezone for clock labels"
    )
    default_duration: str = Field(
        default=DEFAULT_DURATION, description="Window length used when 'to' is not given"
    )
    about_max_chars: int = Field(
        default=DEFAULT_ABOUT_MAX_CHARS, ge=1, description="Description truncation length"
    )
    open_ended_label: str = Field(
        default=DEFAULT_OPEN_ENDED_LABEL, description="End label for events without an end"
    )
    all_day_label: str = Field(
        default=DEFAULT_ALL_DAY_LABEL, description="Start label for single-day all-day events"
    )


class ConfigManager:
    """Manages macro configuration from environment variables and .env files."""

    def __init__(self, env_file_path: Path | None = None):
        """Initialize configuration manager.

        Args:
            env_file_path: Optional path to .env file (defaults to .env in current directory)
        """
        self.env_file_path = env_file_path or Path.cwd() / ".env"

    def load_env_file(self) -> list[str]:
        """Load .env file and set environment variables.

        Only sets variables that are not already in the environment.

        Returns:
            List of environment variable keys that were loaded from .env file
        """
        if not self.env_file_path.exists():
            logger.debug("No .env file found at %s", self.env_file_path)
            return []

        parsed = parse_env_file(self.env_file_path)

        set_keys = []
        for key, val in parsed.items():
            if key not in os.environ:
                os.environ[key] = val
                set_keys.append(key)

        if set_keys:
            logger.debug("Loaded .env defaults for keys: %s", ", ".join(set_keys))

        return set_keys

    def build_config_from_env(self) -> dict[str, Any]:
        """Build configuration dictionary from environment variables.

        Recognizes:
        - GROUP_EVENTS_TIMEZONE -> 'timezone'
        - GROUP_EVENTS_DEFAULT_DURATION -> 'default_duration'
        - GROUP_EVENTS_ABOUT_MAX_CHARS -> 'about_max_chars' (int)
        - GROUP_EVENTS_OPEN_ENDED_LABEL -> 'open_ended_label'
        - GROUP_EVENTS_ALL_DAY_LABEL -> 'all_day_label'

        Returns:
            Configuration dictionary compatible with MacroSettings
        """
        cfg: dict[str, Any] = {}

        if os.environ.get("GROUP_EVENTS_TIMEZONE"):
            cfg["timezone"] = get_default_timezone()

        duration = os.environ.get("GROUP_EVENTS_DEFAULT_DURATION")
        if duration:
            cfg["default_duration"] = duration

        max_chars = os.environ.get("GROUP_EVENTS_ABOUT_MAX_CHARS")
        if max_chars:
            try:
                cfg["about_max_chars"] = int(max_chars)
            except ValueError:
                logger.warning("Invalid GROUP_EVENTS_ABOUT_MAX_CHARS=%r; ignoring", max_chars)

        open_ended = os.environ.get("GROUP_EVENTS_OPEN_ENDED_LABEL")
        if open_ended:
            cfg["open_ended_label"] = open_ended

        all_day = os.environ.get("GROUP_EVENTS_ALL_DAY_LABEL")
        if all_day:
            cfg["all_day_label"] = all_day

        return cfg

    def load_full_config(self) -> dict[str, Any]:
        """Load .env file and build configuration from environment.

        Returns:
            Configuration dictionary
        """
        self.load_env_file()
        return self.build_config_from_env()

    def load_settings(self) -> MacroSettings:
        """Load configuration and validate it into a MacroSettings model."""
        return MacroSettings(**self.load_full_config())


