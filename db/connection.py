from __future__ import annotations

import sqlite3
from pathlib import Path
from typing import Optional, Union

from db import schema


MEMORY = ":memory:"


def get_connection(
    db_path: Union[str, Path],
    timeout: Optional[float] = 30.0,
    bootstrap: bool = False,
) -> sqlite3.Connection:
    """Open the founder store, creating the file's directory if needed.

    File databases run in WAL mode so a report can read while an import
    writes. Foreign keys are always on: founder_companies cascades with its
    founder and company. With bootstrap=True the schema is created as well.
    """
    target = str(db_path)
    if target != MEMORY:
        Path(target).parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(target, timeout=timeout or 30.0)
    if target != MEMORY:
        conn.execute("PRAGMA journal_mode=WAL;")
        conn.execute("PRAGMA synchronous=NORMAL;")
    conn.execute("PRAGMA foreign_keys=ON;")
    if bootstrap:
        schema.bootstrap(conn)
    return conn
