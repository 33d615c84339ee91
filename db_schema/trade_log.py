# db_schema/trade_log.py
"""SQLite SSOT schema: trade log.

One row per recorded trade. `seq` is the append order and breaks ties between
trades with the same created_at during replay.
"""

from __future__ import annotations


def ddl(*, now: str, schema_version: str) -> str:
    """Return DDL SQL for the trade log."""
    _ = (now, schema_version)
    return """
                CREATE TABLE IF NOT EXISTS trades_log (
                    seq INTEGER PRIMARY KEY AUTOINCREMENT,
                    trade_id TEXT NOT NULL UNIQUE,
                    created_at TEXT NOT NULL,
                    from_team TEXT NOT NULL,
                    to_team TEXT NOT NULL,
                    notes TEXT,
                    payload_json TEXT NOT NULL,
                    inserted_at TEXT NOT NULL
                );
                CREATE INDEX IF NOT EXISTS idx_trades_log_created_at ON trades_log(created_at);
"""
