"""Query helpers over short-lived mysql-connector connections.

Every helper opens its own connection through ``db_cursor`` and commits on
success, so repositories never hold a connection between calls.
"""
from __future__ import annotations

from contextlib import contextmanager
from datetime import time, timedelta
from typing import Any, Optional, Sequence

from ..common.datetime_utils import parse_hhmm
from .connection import DatabaseConnection

Row = dict[str, Any]


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    conn = conn_factory.connect()
    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def query_all(conn_factory: DatabaseConnection, sql: str, params: Sequence[Any] = ()) -> list[Row]:
    with db_cursor(conn_factory) as (_, cur):
        cur.execute(sql, tuple(params))
        return list(cur.fetchall() or [])


def query_one(conn_factory: DatabaseConnection, sql: str, params: Sequence[Any] = ()) -> Optional[Row]:
    with db_cursor(conn_factory) as (_, cur):
        cur.execute(sql, tuple(params))
        return cur.fetchone() or None


def execute(conn_factory: DatabaseConnection, sql: str, params: Sequence[Any] = ()) -> int:
    """Run one write statement; returns the rows it matched.

    Connections are opened with FOUND_ROWS, so an UPDATE that rewrites a row
    with identical values still counts.
    """
    with db_cursor(conn_factory) as (_, cur):
        cur.execute(sql, tuple(params))
        return cur.rowcount


def mysql_time(value: Any) -> Optional[time]:
    # mysql-connector hands TIME columns back as timedelta.
    if value is None or isinstance(value, time):
        return value
    if isinstance(value, timedelta):
        seconds = int(value.total_seconds()) % 86400
        return time(seconds // 3600, seconds % 3600 // 60, seconds % 60)
    return parse_hhmm(str(value))
