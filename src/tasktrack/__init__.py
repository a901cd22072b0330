"""Task persistence and query service backed by SQLite."""

__version__ = "0.1.0"
