"""Persist parsed cards to a SQLite table keyed by identifier."""

from __future__ import annotations

import sqlite3
from pathlib import Path
from threading import Lock

import structlog

from ..cards import CardRecord
from ..errors import StoreError
from .base import CardStore

_COLUMNS = (
    "identifier",
    "name",
    "mana_cost",
    "converted_cost",
    "colors",
    "type_line",
    "rules_text",
    "flavor_text",
    "power",
    "toughness",
    "loyalty",
    "rarity",
    "collector_number",
    "artist",
    "watermark",
    "expansion",
    "language",
    "image",
)


class SQLiteCardStore(CardStore):
    """Single shared connection; writes are serialised by an internal lock."""

    def __init__(self, path: Path, table: str = "cards") -> None:
        self.path = path
        self.table = table
        self.logger = structlog.get_logger("gatherer_ingest.store").bind(path=str(path))
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._lock = Lock()
        try:
            self.conn = sqlite3.connect(self.path, check_same_thread=False)
            self.conn.row_factory = sqlite3.Row
            self._ensure_schema()
        except sqlite3.Error as exc:
            raise StoreError(f"Cannot open card database {path}: {exc}") from exc

    def _ensure_schema(self) -> None:
        self.conn.execute(
            f"""
            CREATE TABLE IF NOT EXISTS {self.table} (
                identifier INTEGER PRIMARY KEY,
                name TEXT NOT NULL,
                mana_cost TEXT,
                converted_cost INTEGER,
                colors TEXT,
                type_line TEXT,
                rules_text TEXT,
                flavor_text TEXT,
                power TEXT,
                toughness TEXT,
                loyalty TEXT,
                rarity TEXT,
                collector_number TEXT,
                artist TEXT,
                watermark TEXT,
                expansion TEXT,
                language TEXT,
                image BLOB,
                updated_at TEXT
            )
            """
        )
        self.conn.commit()

    def upsert(self, record: CardRecord) -> bool:
        row = record.to_dict()
        row["image"] = record.image
        placeholders = ", ".join("?" for _ in _COLUMNS)
        updates = ", ".join(f"{column} = excluded.{column}" for column in _COLUMNS[1:])
        sql = (
            f"INSERT INTO {self.table} ({', '.join(_COLUMNS)}, updated_at) "
            f"VALUES ({placeholders}, datetime('now')) "
            f"ON CONFLICT(identifier) DO UPDATE SET {updates}, updated_at = datetime('now')"
        )
        try:
            with self._lock:
                self.conn.execute(sql, tuple(row[column] for column in _COLUMNS))
                self.conn.commit()
        except sqlite3.Error as exc:
            self.logger.error("card_upsert_failed", identifier=record.identifier, error=str(exc))
            return False
        return True

    def get(self, identifier: int) -> dict[str, object] | None:
        with self._lock:
            row = self.conn.execute(
                f"SELECT * FROM {self.table} WHERE identifier = ?", (identifier,)
            ).fetchone()
        return dict(row) if row is not None else None

    def list_known_identifiers(self) -> list[int]:
        with self._lock:
            rows = self.conn.execute(
                f"SELECT identifier FROM {self.table} ORDER BY identifier"
            ).fetchall()
        return [row["identifier"] for row in rows]

    def count(self) -> int:
        with self._lock:
            return self.conn.execute(f"SELECT COUNT(*) FROM {self.table}").fetchone()[0]

    def close(self) -> None:
        with self._lock:
            self.conn.commit()
            self.conn.close()


__all__ = ["SQLiteCardStore"]
