from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence

from mysql.connector import errorcode
from mysql.connector.errors import IntegrityError

from ..core.enums import AttendanceStatus, Role
from ..core.exceptions import ValidationError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import AttendanceRecord, GeoPoint
from .repository import AttendanceRepository

_SELECT = """
    SELECT attendance_id, user_id, name, role, work_date, check_in_time, check_out_time,
           check_in_latitude, check_in_longitude, is_fraudulent, fraud_reason, status
    FROM attendance_records
"""

_INSERT_COLUMNS = """
    (attendance_id, user_id, name, role, work_date, check_in_time, check_out_time,
     check_in_latitude, check_in_longitude, is_fraudulent, fraud_reason, status)
    VALUES (%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
"""


def _to_record(r: dict) -> AttendanceRecord:
    location = None
    if r.get("check_in_latitude") is not None and r.get("check_in_longitude") is not None:
        location = GeoPoint(latitude=float(r["check_in_latitude"]), longitude=float(r["check_in_longitude"]))
    return AttendanceRecord(
        attendance_id=r["attendance_id"],
        user_id=r["user_id"],
        name=r["name"],
        role=Role(r["role"]),
        work_date=r["work_date"],
        status=AttendanceStatus(r["status"]),
        check_in_time=r.get("check_in_time"),
        check_out_time=r.get("check_out_time"),
        check_in_location=location,
        is_fraudulent=bool(r.get("is_fraudulent")),
        fraud_reason=r.get("fraud_reason") or "",
    )


def _params(record: AttendanceRecord) -> tuple:
    loc = record.check_in_location
    return (
        record.attendance_id,
        record.user_id,
        record.name,
        record.role.value,
        record.work_date,
        record.check_in_time,
        record.check_out_time,
        loc.latitude if loc else None,
        loc.longitude if loc else None,
        int(record.is_fraudulent),
        record.fraud_reason,
        record.status.value,
    )


class MySQLAttendanceRepository(AttendanceRepository):
    """``attendance_records`` table; one row per (user_id, work_date)."""

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, attendance_id: str) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE attendance_id=%s", (attendance_id,))
            r = fetchone(cur)
            return _to_record(r) if r else None

    def get_for_user_and_date(self, user_id: str, work_date: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE user_id=%s AND work_date=%s", (user_id, work_date))
            r = fetchone(cur)
            return _to_record(r) if r else None

    def list_for_user(self, user_id: str, limit: int) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT + " WHERE user_id=%s ORDER BY work_date DESC LIMIT %s",
                (user_id, int(limit)),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def list_by_date_range_and_role(self, *, start_date: date, end_date: date, role: Role) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT
                + """
                WHERE role=%s AND work_date BETWEEN %s AND %s
                ORDER BY work_date DESC, check_in_time DESC
                """,
                (role.value, start_date, end_date),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def create(self, record: AttendanceRecord) -> None:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute("INSERT INTO attendance_records" + _INSERT_COLUMNS, _params(record))
        except IntegrityError as exc:
            if exc.errno == errorcode.ER_DUP_ENTRY:
                raise ValidationError("You have already checked in today") from exc
            raise

    def insert_if_absent(self, record: AttendanceRecord) -> bool:
        # INSERT IGNORE makes the existence check and the write one statement.
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("INSERT IGNORE INTO attendance_records" + _INSERT_COLUMNS, _params(record))
            return cur.rowcount > 0

    def set_checkout(self, *, attendance_id: str, check_out_time: datetime) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET check_out_time=%s
                WHERE attendance_id=%s AND check_out_time IS NULL
                """,
                (check_out_time, attendance_id),
            )
            return cur.rowcount > 0
