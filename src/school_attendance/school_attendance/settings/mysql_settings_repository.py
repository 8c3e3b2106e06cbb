from __future__ import annotations

from typing import Any, Mapping, Optional

from ..core.constants import SETTINGS_DOCUMENT_ID
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone, join_csv, normalize_mysql_time, split_csv
from .repository import SettingsRepository

_TIME_COLUMNS = ("check_in_start", "check_in_end", "check_out_start", "check_out_end")
_COLUMNS = _TIME_COLUMNS + (
    "off_days",
    "grace_minutes",
    "school_latitude",
    "school_longitude",
    "school_radius_meters",
)


class MySQLSettingsRepository(SettingsRepository):
    """Settings document stored as one row of ``attendance_settings``.

    NULL columns are reported as missing fields.
    """

    def __init__(self, conn_factory: DatabaseConnection, *, document_id: str = SETTINGS_DOCUMENT_ID):
        self._conn_factory = conn_factory
        self._document_id = document_id

    def get(self) -> Optional[dict[str, Any]]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {', '.join(_COLUMNS)} FROM attendance_settings WHERE settings_id=%s",
                (self._document_id,),
            )
            row = fetchone(cur)
            if not row:
                return None

        doc: dict[str, Any] = {}
        for col in _TIME_COLUMNS:
            if row.get(col) is not None:
                doc[col] = normalize_mysql_time(row[col])
        if row.get("off_days") is not None:
            doc["off_days"] = split_csv(row["off_days"])
        if row.get("grace_minutes") is not None:
            doc["grace_minutes"] = int(row["grace_minutes"])
        for col in ("school_latitude", "school_longitude", "school_radius_meters"):
            if row.get(col) is not None:
                doc[col] = float(row[col])
        return doc

    def merge(self, fields: Mapping[str, Any]) -> None:
        values = {k: v for k, v in fields.items() if k in _COLUMNS}
        if not values:
            return
        if "off_days" in values:
            values["off_days"] = join_csv(values["off_days"])

        columns = list(values)
        placeholders = ", ".join(["%s"] * (len(columns) + 1))
        updates = ", ".join(f"{c}=VALUES({c})" for c in columns)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                INSERT INTO attendance_settings (settings_id, {', '.join(columns)})
                VALUES ({placeholders})
                ON DUPLICATE KEY UPDATE {updates}
                """,
                (self._document_id, *values.values()),
            )
