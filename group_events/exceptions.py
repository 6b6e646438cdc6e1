"""Custom exception hierarchy for the group events macro.

Validation errors are raised before any calendar lookup happens and carry a
user-facing message that the macro renders inline in place of the event list.
Calendar collaborator failures are not part of this hierarchy and
propagate unchanged.
"""

from __future__ import annotations

from typing import Optional


class MacroError(Exception):
    """Base exception for all group events macro errors.

    Attributes:
        user_message: Text shown to the page author in place of the event list
    """

    def __init__(self, user_message: str):
        super().__init__(user_message)
        self.user_message = user_message


class UnsupportedScopeError(MacroError):
    """The macro was rendered outside of a group context."""

    def __init__(self, scope_type: Optional[str] = None):
        super().__init__("[This macro is designed for Groups only]")
        self.scope_type = scope_type


class RangeFilterError(MacroError):
    """A date range argument could not be turned into a valid window.

    Attributes:
        argument: Macro argument name ("from", "to" or "for")
        value: Raw value supplied by the page author
    """

    argument = ""

    def __init__(self, value: str, user_message: str):
        super().__init__(user_message)
        self.value = value


class InvalidFromError(RangeFilterError):
    """The 'from' argument is not a recognised date."""

    argument = "from"

    def __init__(self, value: str):
        super().__init__(
            value,
            f"Invalid 'from' date: '{value}'. Use YYYY-MM-DD, today, yesterday or tomorrow.",
        )


class InvalidToError(RangeFilterError):
    """The 'to' argument is not a recognised date."""

    argument = "to"

    def __init__(self, value: str):
        super().__init__(
            value,
            f"Invalid 'to' date: '{value}'. Use YYYY-MM-DD, today, yesterday or tomorrow.",
        )


class InvalidForError(RangeFilterError):
    """The 'for' argument is not a recognised duration."""

    argument = "for"

    def __init__(self, value: str):
        super().__init__(
            value,
            f"Invalid 'for' duration: '{value}'. Use a number followed by "
            "days, weeks, months or years (e.g. 3 months).",
        )


class RangeOrderError(RangeFilterError):
    """The resolved 'from' date falls after the resolved 'to' date."""

    argument = "to"

    def __init__(self, from_value: str, to_value: str):
        super().__init__(
            to_value,
            f"Invalid date range: 'from' ({from_value}) must not be after 'to' ({to_value}).",
        )
        self.from_value = from_value
