from __future__ import annotations

import logging
from datetime import date, datetime, timedelta

from ..attendance.factory import AttendanceStrategyFactory
from ..attendance.repository import AttendanceRepository
from ..attendance.status import is_off_day, resolve_for_display
from ..common.datetime_utils import now_local
from ..core.enums import AttendanceStatus, Role
from ..settings.service import SettingsService
from ..users.repository import UserRepository
from .model import DailySummary, PeriodReport, RosterEntry

logger = logging.getLogger(__name__)

_ATTENDED = {AttendanceStatus.PRESENT, AttendanceStatus.LATE}


def _rate(part: int, total: int) -> int:
    return round(part / total * 100) if total else 0


class DailySummaryService:
    """Aggregates teachers' derived statuses for dashboards and reports."""

    def __init__(
        self,
        attendance: AttendanceRepository,
        users: UserRepository,
        settings: SettingsService,
        *,
        strategy_factory: AttendanceStrategyFactory | None = None,
    ):
        self._attendance = attendance
        self._users = users
        self._settings = settings
        self._factory = strategy_factory or AttendanceStrategyFactory()

    def summarize(self, day: date, *, now: datetime | None = None) -> DailySummary:
        now = now or now_local()
        config = self._settings.get_window_config()
        teachers = list(self._users.list_by_role(Role.TEACHER))

        if is_off_day(day, config):
            # No per-user classification on off-days.
            return DailySummary(
                day=day,
                is_off_day=True,
                total=len(teachers),
                rate=100,
                roster=[RosterEntry(user=t, status=AttendanceStatus.OFF_DAY) for t in teachers],
            )

        records = {
            r.user_id: r
            for r in self._attendance.list_by_date_range_and_role(start_date=day, end_date=day, role=Role.TEACHER)
        }
        deadline = datetime.combine(day, config.check_in_end) + timedelta(minutes=config.grace_minutes)
        deadline_passed = now > deadline

        roster: list[RosterEntry] = []
        for teacher in teachers:
            record = records.get(teacher.user_id)
            if record is None:
                status = AttendanceStatus.ABSENT if deadline_passed else None
                roster.append(RosterEntry(user=teacher, status=status))
                continue
            status = resolve_for_display(record, config, now, factory=self._factory)
            roster.append(RosterEntry(user=teacher, status=status, is_fraudulent=record.is_fraudulent))

        counts = {s: sum(1 for e in roster if e.status == s) for s in AttendanceStatus}
        attended = counts[AttendanceStatus.PRESENT] + counts[AttendanceStatus.LATE]
        return DailySummary(
            day=day,
            is_off_day=False,
            total=len(teachers),
            present=counts[AttendanceStatus.PRESENT],
            late=counts[AttendanceStatus.LATE],
            absent=counts[AttendanceStatus.ABSENT],
            fraud=counts[AttendanceStatus.FRAUD],
            rate=_rate(attended, len(teachers)),
            roster=roster,
        )

    def period_report(self, start: date, end: date, *, now: datetime | None = None) -> PeriodReport:
        """Week/month/year style totals over stored teacher records."""

        now = now or now_local()
        config = self._settings.get_window_config()
        total = len(self._users.list_by_role(Role.TEACHER))
        records = self._attendance.list_by_date_range_and_role(start_date=start, end_date=end, role=Role.TEACHER)

        displayed = [(r, resolve_for_display(r, config, now, factory=self._factory)) for r in records]
        attended_ids = {r.user_id for r, s in displayed if s in _ATTENDED}
        late = sum(1 for _, s in displayed if s == AttendanceStatus.LATE)

        logger.debug("Period report %s..%s over %d record(s)", start, end, len(records))
        return PeriodReport(
            start=start,
            end=end,
            total=total,
            attended=len(attended_ids),
            late=late,
            absent=max(total - len(attended_ids), 0),
            rate=_rate(len(attended_ids), total),
        )
