"""Calendar-facing models, formatting helpers and the calendar collaborator interface."""
