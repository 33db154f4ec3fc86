"""
Sync Log

Keeps an SQLite audit log of document passes so `remindian status` can show
what happened on earlier runs.
"""

import sqlite3
from pathlib import Path
from datetime import datetime
from typing import Optional
import json

from . import config


class SyncLog:
    """
    Persists sync activity in a SQLite database.

    Schema:
    - sync_log: one row per logged action, with JSON details
    """

    def __init__(self, db_path: Optional[Path] = None):
        """
        Initialize the log database.

        Args:
            db_path: Path to the SQLite database (env: SYNC_LOG_DB)
        """
        if db_path is None:
            db_path = config.SYNC_LOG_DB

        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_db()

    def _init_db(self):
        """Create database tables if they don't exist."""
        with sqlite3.connect(self.db_path) as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS sync_log (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    timestamp INTEGER NOT NULL,
                    action TEXT NOT NULL,
                    document TEXT,
                    details TEXT
                )
            """)

            conn.execute("""
                CREATE INDEX IF NOT EXISTS idx_document
                ON sync_log(document)
            """)

            conn.commit()

    def log_action(self, action: str, document: Optional[str] = None, details: Optional[dict] = None):
        """Log a sync action for auditing."""
        with sqlite3.connect(self.db_path) as conn:
            conn.execute("""
                INSERT INTO sync_log (timestamp, action, document, details)
                VALUES (?, ?, ?, ?)
            """, (
                int(datetime.now().timestamp()),
                action,
                document,
                json.dumps(details) if details else None,
            ))
            conn.commit()

    def get_recent_logs(self, limit: int = 100) -> list[dict]:
        """Get recent log entries, newest first."""
        logs = []
        with sqlite3.connect(self.db_path) as conn:
            conn.row_factory = sqlite3.Row
            cursor = conn.execute(
                "SELECT * FROM sync_log ORDER BY timestamp DESC, id DESC LIMIT ?",
                (limit,)
            )
            for row in cursor:
                logs.append({
                    "id": row["id"],
                    "timestamp": datetime.fromtimestamp(row["timestamp"]),
                    "action": row["action"],
                    "document": row["document"],
                    "details": json.loads(row["details"]) if row["details"] else None,
                })
        return logs

    def clear_all(self):
        """Delete every log entry."""
        with sqlite3.connect(self.db_path) as conn:
            conn.execute("DELETE FROM sync_log")
            conn.commit()

    def get_stats(self) -> dict:
        """Get log statistics."""
        with sqlite3.connect(self.db_path) as conn:
            total = conn.execute("SELECT COUNT(*) FROM sync_log").fetchone()[0]
            documents = conn.execute(
                "SELECT COUNT(DISTINCT document) FROM sync_log WHERE document IS NOT NULL"
            ).fetchone()[0]
            last = conn.execute("SELECT MAX(timestamp) FROM sync_log").fetchone()[0]

            return {
                "total_entries": total,
                "documents": documents,
                "last_sync": datetime.fromtimestamp(last) if last else None,
            }
