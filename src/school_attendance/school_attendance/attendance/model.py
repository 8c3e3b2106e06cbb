from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import AttendanceStatus, Role


@dataclass(frozen=True)
class GeoPoint:
    latitude: float
    longitude: float


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one attendance record per user and day.

    ``status`` is what was decided at write time; what dashboards show comes
    from ``status.resolve_for_display``. Synthetic absences have no check-in.
    """

    attendance_id: str
    user_id: str
    name: str
    role: Role
    work_date: date
    status: AttendanceStatus
    check_in_time: Optional[datetime] = None
    check_out_time: Optional[datetime] = None
    check_in_location: Optional[GeoPoint] = None
    is_fraudulent: bool = False
    fraud_reason: str = ""


@dataclass(frozen=True)
class CheckInResult:
    record: AttendanceRecord
    requires_manual_verification: bool
    message: str
