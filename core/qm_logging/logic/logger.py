"""
core/qm_logging/logic/logger.py
===============================

Thread-safe audit logger with a SQLite backend.

Feature code keeps using ``logging.getLogger(__name__)`` for diagnostics;
this logger records the business events (signature accepted/rejected,
entry signed, stored signature replaced) that must survive the process.
"""

from __future__ import annotations

import os
import sqlite3
import threading
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterator, List, Optional

from core.config.config_service import config_service
from core.qm_logging.models.log_entry import INSERT_COLUMNS, LogEntry


def create_sqlite_connection(db_path: Path) -> sqlite3.Connection:
    """Create a sqlite3 connection with row access by column name."""
    conn = sqlite3.connect(str(db_path), check_same_thread=False)
    conn.row_factory = sqlite3.Row
    return conn


class AuditLogger:
    """Thread-safe audit logger; one SQLite file per instance."""

    def __init__(self, db_path: Optional[Path] = None) -> None:
        self._lock = threading.Lock()
        self._db_path: Path = Path(db_path) if db_path else config_service.logging.audit_db
        self._ensure_db()

    @property
    def db_path(self) -> Path:
        return self._db_path

    def connect(self) -> sqlite3.Connection:
        return create_sqlite_connection(self._db_path)

    @contextmanager
    def _session(self) -> Iterator[sqlite3.Connection]:
        with self._lock:
            conn = self.connect()
            try:
                yield conn
                conn.commit()
            finally:
                conn.close()

    # ------------------------------------------------------------------ #
    #  Public API: log                                                    #
    # ------------------------------------------------------------------ #
    def log(
        self,
        feature: str,
        event: str,
        *,
        user_id: Optional[int] = None,
        level: str = "INFO",
        reference_id: Optional[str] = None,
        message: Optional[str] = None,
    ) -> LogEntry:
        """Persist one entry and return it (with its row id)."""
        entry = LogEntry(
            id=None,
            timestamp=datetime.now(timezone.utc),
            log_level=level,
            user_id=user_id,
            feature=feature,
            event=event,
            reference_id=reference_id,
            message=message,
        )
        entry.id = self._insert_log(entry)
        return entry

    # ------------------------------------------------------------------ #
    #  Fetch / Query / Clear                                              #
    # ------------------------------------------------------------------ #
    def fetch_logs(self, limit: int = 100) -> List[LogEntry]:
        with self._session() as conn:
            rows = conn.execute(
                "SELECT * FROM logs ORDER BY timestamp DESC, id DESC LIMIT ?", (limit,)
            ).fetchall()
            return [LogEntry.from_row(row) for row in rows]

    def query_logs(
        self,
        *,
        user_id: Optional[int] = None,
        feature: Optional[str] = None,
        event: Optional[str] = None,
        reference_id: Optional[str] = None,
        level: Optional[str] = None,
        start_time: Optional[str] = None,
        end_time: Optional[str] = None,
        limit: int = 1_000,
    ) -> List[LogEntry]:
        query = "SELECT * FROM logs WHERE 1=1"
        params: list[object] = []

        if user_id is not None:
            query += " AND user_id = ?"
            params.append(user_id)
        if feature is not None:
            query += " AND feature = ?"
            params.append(feature)
        if event is not None:
            query += " AND event = ?"
            params.append(event)
        if reference_id is not None:
            query += " AND reference_id = ?"
            params.append(reference_id)
        if level is not None:
            query += " AND log_level = ?"
            params.append(level)
        if start_time is not None:
            query += " AND timestamp >= ?"
            params.append(start_time)
        if end_time is not None:
            query += " AND timestamp <= ?"
            params.append(end_time)

        query += " ORDER BY timestamp DESC, id DESC LIMIT ?"
        params.append(limit)

        with self._session() as conn:
            rows = conn.execute(query, params).fetchall()
            return [LogEntry.from_row(row) for row in rows]

    def clear_logs(self) -> None:
        with self._session() as conn:
            conn.execute("DELETE FROM logs")

    # ------------------------------------------------------------------ #
    #  Internal helpers                                                   #
    # ------------------------------------------------------------------ #
    def _ensure_db(self) -> None:
        os.makedirs(self._db_path.parent, exist_ok=True)
        with self._session() as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS logs (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    timestamp TEXT NOT NULL,
                    user_id INTEGER,
                    feature TEXT NOT NULL,
                    event TEXT NOT NULL,
                    reference_id TEXT,
                    message TEXT,
                    log_level TEXT NOT NULL DEFAULT 'INFO'
                )
                """
            )

    def _insert_log(self, entry: LogEntry) -> int:
        with self._session() as conn:
            cur = conn.execute(
                f"INSERT INTO logs ({', '.join(INSERT_COLUMNS)}) "
                f"VALUES ({', '.join('?' * len(INSERT_COLUMNS))})",
                entry.insert_params(),
            )
            return int(cur.lastrowid)

