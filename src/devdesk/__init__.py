"""devdesk: local task manager with due-date alerts and a focus timer."""

__version__ = "0.1.0"
