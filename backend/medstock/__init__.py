"""Pharmacy medicine stock tracker: in-memory stores, reminders and branch merge."""

__version__ = "0.1.0"
