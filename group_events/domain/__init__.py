"""Date range resolution and event display transformation for the group events macro."""
