# db_schema/init.py
"""Public entrypoint for applying the SQLite schema."""

from __future__ import annotations

import sqlite3
from typing import Iterable

from . import core, trade_log
from .registry import apply_all


# Order matters: core (meta) first.
DEFAULT_MODULES = (
    core,
    trade_log,
)


def apply_schema(
    cur: sqlite3.Cursor,
    *,
    now: str,
    schema_version: str,
    modules: Iterable[object] = DEFAULT_MODULES,
) -> None:
    """Apply the schema (core -> trade_log)."""
    apply_all(
        cur,
        modules=modules,  # type: ignore[arg-type]
        now=now,
        schema_version=schema_version,
    )
