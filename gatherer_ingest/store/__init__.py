"""Card persistence: store SPI, SQLite implementation and the shared sink."""

from .base import CardStore
from .sink import CardSink, WriteCounter
from .sqlite_store import SQLiteCardStore

__all__ = ["CardSink", "CardStore", "SQLiteCardStore", "WriteCounter"]
