# db_schema/registry.py
"""Schema registry + applier.

Applies the DDL of every schema module (via executescript) and records which
modules were applied.
"""

from __future__ import annotations

import sqlite3
from types import ModuleType
from typing import Iterable


def apply_all(
    cur: sqlite3.Cursor,
    *,
    modules: Iterable[ModuleType],
    now: str,
    schema_version: str,
) -> None:
    """Apply schema modules.

    Steps:
    1) executescript(concat(ddl))
    2) record applied module names in meta
    """
    mods = list(modules)
    ddl_parts = [m.ddl(now=now, schema_version=schema_version) for m in mods]
    cur.executescript("\n\n".join(ddl_parts))

    names = ",".join(m.__name__.rsplit(".", 1)[-1] for m in mods)
    cur.execute(
        "INSERT INTO meta(key, value) VALUES ('schema_modules', ?) "
        "ON CONFLICT(key) DO UPDATE SET value=excluded.value;",
        (names,),
    )
