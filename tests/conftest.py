from __future__ import annotations

import base64
import io
from dataclasses import replace
from datetime import date, datetime
from typing import Optional

import pytest
from PIL import Image

from school_attendance.attendance.model import AttendanceRecord
from school_attendance.container import assemble
from school_attendance.core.enums import Role
from school_attendance.core.exceptions import ValidationError
from school_attendance.fraud.model import FraudVerdict
from school_attendance.settings.model import AttendanceWindowConfig, ExpectedLocation
from school_attendance.users.model import User

SCHOOL = ExpectedLocation(latitude=-6.241169, longitude=107.0378, radius_meters=100.0)


class InMemoryUsers:
    def __init__(self, users: list[User]):
        self._by_id = {u.user_id: u for u in users}

    def get_by_id(self, user_id: str) -> Optional[User]:
        return self._by_id.get(user_id)

    def list_by_role(self, role: Role):
        return [u for u in self._by_id.values() if u.role == role]


class InMemoryAttendance:
    """Mirrors the MySQL table: unique id and unique (user_id, work_date)."""

    def __init__(self):
        self.records: dict[str, AttendanceRecord] = {}

    def _clashes(self, record: AttendanceRecord) -> bool:
        return record.attendance_id in self.records or any(
            r.user_id == record.user_id and r.work_date == record.work_date for r in self.records.values()
        )

    def get_by_id(self, attendance_id: str) -> Optional[AttendanceRecord]:
        return self.records.get(attendance_id)

    def get_for_user_and_date(self, user_id: str, work_date: date) -> Optional[AttendanceRecord]:
        for r in self.records.values():
            if r.user_id == user_id and r.work_date == work_date:
                return r
        return None

    def list_for_user(self, user_id: str, limit: int):
        items = [r for r in self.records.values() if r.user_id == user_id]
        items.sort(key=lambda r: r.work_date, reverse=True)
        return items[:limit]

    def list_by_date_range_and_role(self, *, start_date: date, end_date: date, role: Role):
        items = [r for r in self.records.values() if r.role == role and start_date <= r.work_date <= end_date]
        items.sort(key=lambda r: (r.work_date, r.check_in_time or datetime.min), reverse=True)
        return items

    def create(self, record: AttendanceRecord) -> None:
        if self._clashes(record):
            raise ValidationError("You have already checked in today")
        self.records[record.attendance_id] = record

    def insert_if_absent(self, record: AttendanceRecord) -> bool:
        if self._clashes(record):
            return False
        self.records[record.attendance_id] = record
        return True

    def set_checkout(self, *, attendance_id: str, check_out_time: datetime) -> bool:
        rec = self.records.get(attendance_id)
        if not rec or rec.check_out_time is not None:
            return False
        self.records[attendance_id] = replace(rec, check_out_time=check_out_time)
        return True


class InMemorySettings:
    def __init__(self, doc: Optional[dict] = None):
        self.doc = doc

    def get(self):
        return dict(self.doc) if self.doc is not None else None

    def merge(self, fields):
        self.doc = {**(self.doc or {}), **fields}


class StubAssessor:
    """Deterministic stand-in for the inference service."""

    def __init__(self, verdict: Optional[FraudVerdict] = None, error: Optional[Exception] = None):
        self.verdict = verdict or FraudVerdict(is_fraudulent=False, reason="Location and selfie look consistent")
        self.error = error
        self.calls = []

    def assess(self, submission, expected):
        self.calls.append((submission, expected))
        if self.error is not None:
            raise self.error
        return self.verdict


@pytest.fixture()
def window() -> AttendanceWindowConfig:
    return AttendanceWindowConfig()


@pytest.fixture()
def teachers() -> list[User]:
    return [
        User(user_id="t1", name="Budi", email="budi@example.sch.id", role=Role.TEACHER),
        User(user_id="t2", name="Sari", email="sari@example.sch.id", role=Role.TEACHER),
    ]


@pytest.fixture()
def users_repo(teachers) -> InMemoryUsers:
    return InMemoryUsers(
        teachers
        + [
            User(user_id="s1", name="Rina", email="rina@example.sch.id", role=Role.STUDENT),
            User(user_id="a1", name="Admin", email="admin@example.sch.id", role=Role.ADMIN),
        ]
    )


@pytest.fixture()
def attendance_repo() -> InMemoryAttendance:
    return InMemoryAttendance()


@pytest.fixture()
def settings_repo() -> InMemorySettings:
    return InMemorySettings()


@pytest.fixture()
def assessor() -> StubAssessor:
    return StubAssessor()


@pytest.fixture()
def container(attendance_repo, users_repo, settings_repo, assessor):
    return assemble(
        attendance_repo=attendance_repo,
        users_repo=users_repo,
        settings_repo=settings_repo,
        assessor=assessor,
        default_location=SCHOOL,
    )


@pytest.fixture()
def photo_data_uri() -> str:
    buf = io.BytesIO()
    Image.new("RGB", (8, 8), "white").save(buf, format="PNG")
    return "data:image/png;base64," + base64.b64encode(buf.getvalue()).decode("ascii")


@pytest.fixture()
def fixed_now() -> datetime:
    # Monday
    return datetime(2026, 2, 2, 8, 30, 0)
