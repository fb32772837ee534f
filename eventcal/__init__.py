"""Month-view event calendar: recurrence expansion, conflict detection, event store."""

__version__ = "0.1.0"
