"""SQLite-backed usage log storage."""

from __future__ import annotations

import sqlite3
from datetime import datetime
from pathlib import Path

from skillx.logging.models import UsageLog

DEFAULT_DB_PATH = Path.home() / ".skillx" / "usage.db"

_COLUMNS = (
    "id", "session_id", "timestamp", "mode", "run_id", "skills_count",
    "match_score", "roadmap_hours", "elapsed_seconds", "total_input_tokens",
    "total_output_tokens", "estimated_cost_usd", "success", "error_kind",
    "error_message",
)


class UsageStore:
    """SQLite-backed store for usage logs with WAL mode."""

    def __init__(self, db_path: str | Path = DEFAULT_DB_PATH):
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_db()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self.db_path))
        conn.execute("PRAGMA journal_mode=WAL")
        return conn

    def _init_db(self) -> None:
        with self._connect() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS usage_logs (
                    id TEXT PRIMARY KEY,
                    session_id TEXT NOT NULL,
                    timestamp TEXT NOT NULL,
                    mode TEXT NOT NULL,
                    run_id INTEGER,
                    skills_count INTEGER,
                    match_score REAL,
                    roadmap_hours REAL,
                    elapsed_seconds REAL NOT NULL DEFAULT 0.0,
                    total_input_tokens INTEGER NOT NULL DEFAULT 0,
                    total_output_tokens INTEGER NOT NULL DEFAULT 0,
                    estimated_cost_usd REAL NOT NULL DEFAULT 0.0,
                    success INTEGER NOT NULL DEFAULT 1,
                    error_kind TEXT,
                    error_message TEXT
                )
            """)

    def save_log(self, log: UsageLog) -> None:
        """Persist a usage log entry."""
        placeholders = ", ".join("?" for _ in _COLUMNS)
        with self._connect() as conn:
            conn.execute(
                f"INSERT OR REPLACE INTO usage_logs ({', '.join(_COLUMNS)}) VALUES ({placeholders})",
                (
                    log.id,
                    log.session_id,
                    log.timestamp.isoformat(),
                    log.mode,
                    log.run_id,
                    log.skills_count,
                    log.match_score,
                    log.roadmap_hours,
                    log.elapsed_seconds,
                    log.total_input_tokens,
                    log.total_output_tokens,
                    log.estimated_cost_usd,
                    1 if log.success else 0,
                    log.error_kind,
                    log.error_message,
                ),
            )

    def get_logs(
        self,
        mode: str | None = None,
        limit: int = 50,
    ) -> list[UsageLog]:
        """Retrieve usage logs, newest first, optionally filtered by mode."""
        query = f"SELECT {', '.join(_COLUMNS)} FROM usage_logs"
        params: tuple = ()
        if mode is not None:
            query += " WHERE mode = ?"
            params = (mode,)
        query += " ORDER BY timestamp DESC LIMIT ?"
        with self._connect() as conn:
            rows = conn.execute(query, params + (limit,)).fetchall()
        return [self._row_to_log(row) for row in rows]

    def get_monthly_stats(self) -> dict:
        """Get aggregated stats for the current month."""
        now = datetime.now()
        month_start = now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
        with self._connect() as conn:
            row = conn.execute(
                """SELECT
                       COUNT(*) as total_runs,
                       SUM(total_input_tokens) as total_input,
                       SUM(total_output_tokens) as total_output,
                       SUM(estimated_cost_usd) as total_cost,
                       AVG(match_score) as avg_match_score,
                       SUM(CASE WHEN success = 1 THEN 1 ELSE 0 END) as success_count,
                       SUM(CASE WHEN error_kind = 'rate_limited' THEN 1 ELSE 0 END) as throttled
                   FROM usage_logs
                   WHERE timestamp >= ?""",
                (month_start.isoformat(),),
            ).fetchone()
        return {
            "total_runs": row[0] or 0,
            "total_input_tokens": row[1] or 0,
            "total_output_tokens": row[2] or 0,
            "total_cost_usd": row[3] or 0.0,
            "avg_match_score": round(row[4], 1) if row[4] is not None else None,
            "success_rate": (row[5] / row[0] * 100) if row[0] else 0.0,
            "rate_limited_runs": row[6] or 0,
            "month": now.strftime("%Y-%m"),
        }

    def get_total_cost(self) -> float:
        """Get total estimated cost across all logs."""
        with self._connect() as conn:
            row = conn.execute(
                "SELECT SUM(estimated_cost_usd) FROM usage_logs"
            ).fetchone()
        return row[0] or 0.0

    @staticmethod
    def _row_to_log(row: tuple) -> UsageLog:
        values = dict(zip(_COLUMNS, row))
        values["timestamp"] = datetime.fromisoformat(values["timestamp"])
        values["success"] = bool(values["success"])
        return UsageLog(**values)
