"""Core utilities for group_events: configuration and timezone handling."""
