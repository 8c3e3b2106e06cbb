from datetime import date, datetime

from school_attendance.attendance.factory import AttendanceStrategyFactory
from school_attendance.attendance.model import AttendanceRecord
from school_attendance.core.enums import AttendanceStatus, Role
from school_attendance.reports.controller import period_start
from school_attendance.reports.service import DailySummaryService
from school_attendance.settings.model import ExpectedLocation
from school_attendance.settings.service import SettingsService

MONDAY = date(2026, 2, 2)
SATURDAY = date(2026, 2, 7)


class ExplodingFactory(AttendanceStrategyFactory):
    def for_checkin(self, **kwargs):
        raise AssertionError("strategy factory must not be used")

    def for_display(self, **kwargs):
        raise AssertionError("strategy factory must not be used")


def _record(user_id, status, check_in=None, **kwargs) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=f"rec-{user_id}",
        user_id=user_id,
        name=user_id,
        role=Role.TEACHER,
        work_date=kwargs.pop("work_date", MONDAY),
        status=status,
        check_in_time=check_in,
        **kwargs,
    )


def test_off_day_reports_everyone_off_without_classifying(attendance_repo, users_repo, settings_repo):
    settings = SettingsService(settings_repo, default_location=ExpectedLocation(0.0, 0.0, 100.0))
    attendance_repo.create(_record("t1", AttendanceStatus.LATE, datetime(2026, 2, 7, 10, 0), work_date=SATURDAY))
    service = DailySummaryService(attendance_repo, users_repo, settings, strategy_factory=ExplodingFactory())

    summary = service.summarize(SATURDAY, now=datetime(2026, 2, 7, 20, 0))

    assert summary.is_off_day
    assert [e.status for e in summary.roster] == [AttendanceStatus.OFF_DAY, AttendanceStatus.OFF_DAY]
    assert (summary.present, summary.late, summary.absent, summary.fraud) == (0, 0, 0, 0)
    assert summary.rate == 100


def test_missing_teacher_is_not_absent_before_grace_ends(container, attendance_repo):
    attendance_repo.create(_record("t1", AttendanceStatus.PRESENT, datetime(2026, 2, 2, 7, 30)))

    summary = container.summary_service.summarize(MONDAY, now=datetime(2026, 2, 2, 9, 45))

    statuses = {e.user.user_id: e.status for e in summary.roster}
    assert statuses == {"t1": AttendanceStatus.PRESENT, "t2": None}
    assert summary.absent == 0
    assert summary.rate == 50


def test_missing_teacher_is_absent_after_grace(container, attendance_repo):
    attendance_repo.create(_record("t1", AttendanceStatus.PRESENT, datetime(2026, 2, 2, 7, 30)))

    summary = container.summary_service.summarize(MONDAY, now=datetime(2026, 2, 2, 10, 1))

    assert summary.absent == 1
    assert summary.present == 1


def test_summary_uses_display_status(container, attendance_repo):
    attendance_repo.create(_record("t1", AttendanceStatus.PRESENT, datetime(2026, 2, 2, 7, 30)))
    attendance_repo.create(
        _record("t2", AttendanceStatus.FRAUD, datetime(2026, 2, 2, 7, 35), is_fraudulent=True, fraud_reason="Screen photo")
    )

    summary = container.summary_service.summarize(MONDAY, now=datetime(2026, 2, 2, 18, 0))

    assert (summary.present, summary.late, summary.fraud) == (0, 1, 1)
    assert summary.rate == 50
    data = summary.to_dict()
    assert data["day"] == "2026-02-02"
    assert {row["user_id"]: row["is_fraudulent"] for row in data["roster"]} == {"t1": False, "t2": True}


def test_period_report_counts_unique_attending_teachers(container, attendance_repo):
    attendance_repo.create(_record("t1", AttendanceStatus.PRESENT, datetime(2026, 2, 2, 7, 30)))
    attendance_repo.create(
        AttendanceRecord(
            attendance_id="rec-t1-tue",
            user_id="t1",
            name="t1",
            role=Role.TEACHER,
            work_date=date(2026, 2, 3),
            status=AttendanceStatus.LATE,
            check_in_time=datetime(2026, 2, 3, 9, 30),
        )
    )
    attendance_repo.create(_record("t2", AttendanceStatus.ABSENT, work_date=date(2026, 2, 3)))

    report = container.summary_service.period_report(MONDAY, date(2026, 2, 3), now=datetime(2026, 2, 3, 12, 0))

    assert report.total == 2
    assert report.attended == 1
    assert report.late == 2
    assert report.absent == 1
    assert report.rate == 50


def test_period_start():
    wednesday = date(2026, 2, 4)

    assert period_start("today", wednesday) == wednesday
    assert period_start("week", wednesday) == date(2026, 2, 1)
    assert period_start("week", date(2026, 2, 1)) == date(2026, 2, 1)
    assert period_start("month", wednesday) == date(2026, 2, 1)
    assert period_start("year", wednesday) == date(2026, 1, 1)
