from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Iterable

from ..common.datetime_utils import format_hhmm, now_local
from ..core.constants import ABSENT_ID_PREFIX
from ..core.enums import AttendanceStatus, Role
from ..core.exceptions import ValidationError
from ..settings.service import SettingsService
from ..users.model import User
from ..users.repository import UserRepository
from .model import AttendanceRecord
from .repository import AttendanceRepository
from .status import is_off_day

logger = logging.getLogger(__name__)


def absent_record_id(day: date, user_id: str) -> str:
    """Deterministic id of the synthetic absence for (day, user)."""
    return f"{ABSENT_ID_PREFIX}{day:%Y-%m-%d}-{user_id}"


class AbsenceSweepService:
    """End-of-day batch that writes ABSENT records for teachers without one.

    This is the only place records are created without a check-in. Writes go
    through ``insert_if_absent`` keyed by ``absent_record_id`` so running the
    sweep again for the same day creates nothing new.
    """

    def __init__(self, attendance: AttendanceRepository, users: UserRepository, settings: SettingsService):
        self._attendance = attendance
        self._users = users
        self._settings = settings

    def mark_absentees(self, now: datetime, teachers: Iterable[User], present_user_ids: Iterable[str]) -> int:
        day = now.date()
        present = set(present_user_ids)
        created = 0

        for teacher in teachers:
            if teacher.user_id in present:
                continue
            record = AttendanceRecord(
                attendance_id=absent_record_id(day, teacher.user_id),
                user_id=teacher.user_id,
                name=teacher.name,
                role=teacher.role,
                work_date=day,
                status=AttendanceStatus.ABSENT,
            )
            if self._attendance.insert_if_absent(record):
                created += 1

        return created

    def run(self, *, now: datetime | None = None) -> int:
        """Sweep today. Off-days are skipped; the check-out window must be closed."""

        now = now or now_local()
        config = self._settings.get_window_config()
        if is_off_day(now.date(), config):
            logger.info("Absence sweep skipped: %s is an off-day", now.date())
            return 0
        if now.time() <= config.check_out_end:
            raise ValidationError(f"Absence sweep runs after {format_hhmm(config.check_out_end)}")

        teachers = self._users.list_by_role(Role.TEACHER)
        today = self._attendance.list_by_date_range_and_role(start_date=now.date(), end_date=now.date(), role=Role.TEACHER)
        created = self.mark_absentees(now, teachers, {r.user_id for r in today})
        logger.info("Absence sweep for %s created %d record(s)", now.date(), created)
        return created
