from __future__ import annotations

import logging
from contextlib import contextmanager
from datetime import time, timedelta
from typing import Any, Dict, Iterable, List, Optional

from .connection import DatabaseConnection

logger = logging.getLogger(__name__)


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    """Yield ``(conn, cursor)``; commit on success, roll back and re-raise on error."""

    conn = conn_factory.connect()
    cur = conn.cursor(dictionary=dictionary)
    try:
        yield conn, cur
        conn.commit()
    except Exception as exc:
        logger.warning("Rolling back MySQL transaction: %s", exc)
        conn.rollback()
        raise
    finally:
        cur.close()
        conn.close()


def fetchone(cur) -> Optional[Dict[str, Any]]:
    return cur.fetchone() or None


def fetchall(cur) -> List[Dict[str, Any]]:
    return list(cur.fetchall() or [])


def normalize_mysql_time(value: Any) -> Optional[time]:
    """Normalize a MySQL TIME column.

    mysql-connector hands TIME back as ``timedelta`` (pure driver), ``time``
    or ``'HH:MM:SS'`` depending on the connector flavour.
    """

    if value is None or isinstance(value, time):
        return value

    if isinstance(value, timedelta):
        seconds = int(value.total_seconds()) % 86400
        return time(seconds // 3600, (seconds % 3600) // 60, seconds % 60)

    if isinstance(value, str):
        hh, _, rest = value.strip().partition(":")
        mm, _, ss = rest.partition(":")
        if not hh or not mm:
            raise ValueError(f"Invalid time string: {value!r}")
        return time(int(hh), int(mm), int(ss or 0))

    raise TypeError(f"Unsupported MySQL TIME value type: {type(value)!r}")


def split_csv(value: Optional[str]) -> list[str]:
    """Column stored as comma separated names (e.g. off days)."""
    if not value:
        return []
    return [item.strip() for item in value.split(",") if item.strip()]


def join_csv(items: Iterable[str]) -> str:
    return ",".join(sorted(items))
