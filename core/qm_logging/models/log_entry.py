"""
log_entry.py

One row of the signing audit trail (``logs`` table).
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Mapping, Optional, Tuple

# Insert order used by ``AuditLogger``; ``id`` is assigned by SQLite.
INSERT_COLUMNS: Tuple[str, ...] = (
    "timestamp", "user_id", "feature", "event", "reference_id", "message", "log_level",
)


@dataclass
class LogEntry:
    id: Optional[int]
    timestamp: datetime
    log_level: str
    user_id: Optional[int]
    feature: str
    event: str
    reference_id: Optional[str]
    message: Optional[str]

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "LogEntry":
        """Build from a ``sqlite3.Row`` (or any mapping with the table's columns)."""
        ts = row["timestamp"]
        if isinstance(ts, str):
            ts = datetime.fromisoformat(ts)
        if ts.tzinfo is None:
            ts = ts.replace(tzinfo=timezone.utc)
        return cls(
            id=row["id"],
            timestamp=ts,
            log_level=row["log_level"] or "INFO",
            user_id=row["user_id"],
            feature=row["feature"],
            event=row["event"],
            reference_id=row["reference_id"],
            message=row["message"],
        )

    def insert_params(self) -> Tuple[Any, ...]:
        """Values in ``INSERT_COLUMNS`` order."""
        return (
            self.timestamp.isoformat(),
            self.user_id,
            self.feature,
            self.event,
            self.reference_id,
            self.message,
            self.log_level,
        )

