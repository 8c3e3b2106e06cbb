from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import Role
from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    def get_by_id(self, attendance_id: str) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def get_for_user_and_date(self, user_id: str, work_date: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def list_for_user(self, user_id: str, limit: int) -> Sequence[AttendanceRecord]:
        """Most recent first."""
        raise NotImplementedError

    def list_by_date_range_and_role(self, *, start_date: date, end_date: date, role: Role) -> Sequence[AttendanceRecord]:
        """Records with ``start_date <= work_date <= end_date``, most recent check-in first."""
        raise NotImplementedError

    def create(self, record: AttendanceRecord) -> None:
        raise NotImplementedError

    def insert_if_absent(self, record: AttendanceRecord) -> bool:
        """Write the record unless its id already exists. Returns True when written."""
        raise NotImplementedError

    def set_checkout(self, *, attendance_id: str, check_out_time: datetime) -> bool:
        raise NotImplementedError
