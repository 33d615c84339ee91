# league_repo.py
# Developer note:
# - SQLite DB is the single source of truth (SSOT) for the trade log.
# - The seed (teams + baseline picks) is immutable JSON; see state.load_seed().
# - Current pick ownership is never persisted. It is replayed from seed + log.
"""
LeagueRepository: persisted-data SSOT (SQLite)

Usage (CLI):
  python league_repo.py init --db <db_path>
  python league_repo.py list-trades --db <db_path>
  python league_repo.py delete-trade --db <db_path> --trade-id <id>
  python league_repo.py validate --db <db_path>

Python:
  from league_repo import LeagueRepo
  with LeagueRepo("<db_path>") as repo:
      repo.init_db()
      trades = repo.list_trades()
"""

from __future__ import annotations

import argparse
import contextlib
import json
import logging
import sqlite3
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from schema import SCHEMA_VERSION
from trade_time import to_utc_iso, utc_now
from trades.errors import TradeError
from trades.models import Trade, parse_trade, serialize_trade


logger = logging.getLogger(__name__)
_WARN_COUNTS: Dict[str, int] = {}


def _warn_limited(code: str, msg: str, *, limit: int = 5) -> None:
    n = _WARN_COUNTS.get(code, 0)
    if n < limit:
        logger.warning("%s %s", code, msg)
    _WARN_COUNTS[code] = n + 1


def _utc_now_iso() -> str:
    return to_utc_iso(utc_now())


def _json_dumps(obj: Any) -> str:
    return json.dumps(
        obj,
        ensure_ascii=False,
        separators=(",", ":"),
        sort_keys=True,
        default=str,
    )


def _json_loads(value: Any, default: Any):
    """
    Safe JSON loader:
    - None -> default
    - already dict/list -> returns as-is
    - invalid JSON -> default
    """
    if value is None:
        return default
    if isinstance(value, (dict, list)):
        return value
    try:
        return json.loads(value)
    except (json.JSONDecodeError, TypeError):
        _warn_limited("JSON_DECODE_FAILED", f"value_preview={repr(str(value))[:120]}", limit=3)
        return default


# ----------------------------
# Repository
# ----------------------------

class LeagueRepo:
    def __init__(self, db_path: str | Path):
        self.db_path = str(db_path)
        if self.db_path != ":memory:":
            Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
        self._conn = sqlite3.connect(self.db_path)
        self._conn.row_factory = sqlite3.Row
        self._conn.execute("PRAGMA foreign_keys = ON;")
        self._conn.execute("PRAGMA journal_mode = WAL;")
        # Nested transaction support (SAVEPOINT) for callers that compose repo methods.
        # (SQLite raises if BEGIN is issued while a transaction is already active.)
        self._savepoint_seq = 0

    def close(self) -> None:
        try:
            self._conn.close()
        except sqlite3.Error:
            logger.warning("LeagueRepo.close failed db=%s", self.db_path, exc_info=True)

    @contextlib.contextmanager
    def transaction(self, *, immediate: bool = False):
        """
        Atomic transaction helper.

        Supports nesting via SAVEPOINT:
        - outermost: BEGIN [IMMEDIATE] ... COMMIT/ROLLBACK
        - nested: SAVEPOINT ... RELEASE (or ROLLBACK TO + RELEASE on error)

        immediate=True takes the write lock up front so a read-validate-append
        sequence cannot interleave with another writer.
        """
        cur = self._conn.cursor()
        nested = bool(getattr(self._conn, "in_transaction", False))
        sp_name = None
        try:
            if nested:
                self._savepoint_seq += 1
                sp_name = f"sp_{self._savepoint_seq}"
                cur.execute(f"SAVEPOINT {sp_name};")
            else:
                self._conn.execute("BEGIN IMMEDIATE;" if immediate else "BEGIN;")

            yield cur

            if nested and sp_name:
                cur.execute(f"RELEASE SAVEPOINT {sp_name};")
            else:
                self._conn.commit()
        except Exception:
            if nested and sp_name:
                # Roll back to the savepoint only; do NOT rollback the outer transaction here.
                try:
                    cur.execute(f"ROLLBACK TO SAVEPOINT {sp_name};")
                finally:
                    cur.execute(f"RELEASE SAVEPOINT {sp_name};")
            else:
                self._conn.rollback()
            raise
        finally:
            cur.close()

    # ------------------------
    # Schema
    # ------------------------

    def init_db(self) -> None:
        """Apply SQLite schema (DDL) via db_schema."""
        from db_schema import apply_schema

        now = _utc_now_iso()
        with self.transaction() as cur:
            apply_schema(
                cur,
                now=now,
                schema_version=SCHEMA_VERSION,
            )

    # ------------------------
    # Trade log
    # ------------------------

    def insert_trade(self, trade: Trade) -> None:
        payload = serialize_trade(trade)
        with self.transaction() as cur:
            cur.execute(
                """
                INSERT INTO trades_log(
                    trade_id, created_at, from_team, to_team, notes, payload_json, inserted_at
                )
                VALUES (?, ?, ?, ?, ?, ?, ?);
                """,
                (
                    trade.id,
                    trade.created_at,
                    trade.from_team_id,
                    trade.to_team_id,
                    trade.notes,
                    _json_dumps(payload),
                    _utc_now_iso(),
                ),
            )

    def _row_to_trade(self, row: sqlite3.Row) -> Optional[Trade]:
        payload = _json_loads(row["payload_json"], None)
        if not isinstance(payload, dict):
            _warn_limited("TRADE_PAYLOAD_INVALID", f"trade_id={row['trade_id']!r}", limit=3)
            return None
        try:
            return parse_trade(payload)
        except TradeError:
            _warn_limited("TRADE_PAYLOAD_UNPARSEABLE", f"trade_id={row['trade_id']!r}", limit=3)
            return None

    def list_trades(self, *, strict: bool = False) -> List[Trade]:
        """Return the trade log in append order (seq ASC).

        Unparseable rows are skipped with a warning, or raise ValueError when
        strict=True. Writers must read strictly: validating against a log with
        rows missing can admit an illegal trade.
        """
        rows = self._conn.execute(
            "SELECT trade_id, payload_json FROM trades_log ORDER BY seq ASC;"
        ).fetchall()
        out: List[Trade] = []
        bad: List[str] = []
        for r in rows:
            trade = self._row_to_trade(r)
            if trade is None:
                bad.append(str(r["trade_id"]))
                continue
            out.append(trade)
        if strict and bad:
            raise ValueError(f"corrupt trade log rows: {bad!r}")
        return out

    def get_trade(self, trade_id: str) -> Optional[Trade]:
        row = self._conn.execute(
            "SELECT trade_id, payload_json FROM trades_log WHERE trade_id = ?;",
            (str(trade_id),),
        ).fetchone()
        if row is None:
            return None
        return self._row_to_trade(row)

    def delete_trade(self, trade_id: str) -> bool:
        """Delete one trade by id. Returns False if it was not in the log."""
        with self.transaction() as cur:
            cur.execute("DELETE FROM trades_log WHERE trade_id = ?;", (str(trade_id),))
            return cur.rowcount > 0

    def count_trades(self) -> int:
        row = self._conn.execute("SELECT COUNT(*) AS c FROM trades_log;").fetchone()
        return int(row["c"]) if row else 0

    # ------------------------
    # Integrity
    # ------------------------

    def validate_integrity(self) -> None:
        """Fail loudly if any stored trade payload cannot be parsed back."""
        rows = self._conn.execute(
            "SELECT trade_id, payload_json FROM trades_log ORDER BY seq ASC;"
        ).fetchall()
        bad: List[str] = []
        for r in rows:
            payload = _json_loads(r["payload_json"], None)
            if not isinstance(payload, dict):
                bad.append(str(r["trade_id"]))
                continue
            try:
                trade = parse_trade(payload)
            except TradeError:
                bad.append(str(r["trade_id"]))
                continue
            if trade.id != r["trade_id"]:
                bad.append(str(r["trade_id"]))
        if bad:
            raise ValueError(f"corrupt trade log rows: {bad!r}")

    # ------------------------
    # Convenience
    # ------------------------

    def __enter__(self) -> "LeagueRepo":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


# ----------------------------
# CLI
# ----------------------------

def _cmd_init(args) -> None:
    with LeagueRepo(args.db) as repo:
        repo.init_db()
    print(f"OK: initialized {args.db}")


def _cmd_list_trades(args) -> None:
    with LeagueRepo(args.db) as repo:
        for trade in repo.list_trades():
            print(_json_dumps(serialize_trade(trade)))


def _cmd_delete_trade(args) -> None:
    with LeagueRepo(args.db) as repo:
        if not repo.delete_trade(args.trade_id):
            raise SystemExit(f"ERROR: trade not found: {args.trade_id}")
    print(f"OK: deleted trade {args.trade_id}")


def _cmd_validate(args) -> None:
    with LeagueRepo(args.db) as repo:
        repo.validate_integrity()
    print(f"OK: validation passed for {args.db}")


def main(argv: Optional[Sequence[str]] = None) -> None:
    p = argparse.ArgumentParser(description="LeagueRepo (SQLite trade log)")
    sub = p.add_subparsers(dest="cmd", required=True)

    p_init = sub.add_parser("init", help="initialize DB schema")
    p_init.add_argument("--db", required=True, help="path to sqlite db file")
    p_init.set_defaults(func=_cmd_init)

    p_list = sub.add_parser("list-trades", help="print the trade log as JSON lines")
    p_list.add_argument("--db", required=True, help="path to sqlite db file")
    p_list.set_defaults(func=_cmd_list_trades)

    p_del = sub.add_parser("delete-trade", help="delete one trade by id")
    p_del.add_argument("--db", required=True, help="path to sqlite db file")
    p_del.add_argument("--trade-id", required=True, help="trade id to delete")
    p_del.set_defaults(func=_cmd_delete_trade)

    p_val = sub.add_parser("validate", help="validate stored trade payloads")
    p_val.add_argument("--db", required=True, help="path to sqlite db file")
    p_val.set_defaults(func=_cmd_validate)

    args = p.parse_args(argv)
    args.func(args)


if __name__ == "__main__":
    main()
