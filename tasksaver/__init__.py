"""TaskSaver - tasks, events, calendar and messaging for one person."""

__version__ = "0.1.0"
