"""Sports tracker: activity logging with a public feed, likes, comments and local weather."""

__version__ = "0.1.0"
