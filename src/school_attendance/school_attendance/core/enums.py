from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User roles. Only teachers are swept for absences."""

    ADMIN = "admin"
    TEACHER = "teacher"
    STUDENT = "student"


class AttendanceStatus(str, Enum):
    """Attendance status stored with a record (or derived for display)."""

    PRESENT = "PRESENT"
    LATE = "LATE"
    ABSENT = "ABSENT"
    OFF_DAY = "OFF_DAY"
    FRAUD = "FRAUD"
