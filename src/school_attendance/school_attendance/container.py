from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional

from .attendance.factory import AttendanceStrategyFactory
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .attendance.sweep import AbsenceSweepService
from .core.constants import DEFAULT_SCHOOL_LATITUDE, DEFAULT_SCHOOL_LONGITUDE, DEFAULT_SCHOOL_RADIUS_METERS
from .database.connection import DatabaseConnection, DBConfig
from .fraud.assessor import FraudAssessor
from .fraud.gemini_assessor import DEFAULT_MODEL, GeminiFraudAssessor
from .reports.service import DailySummaryService
from .settings.model import ExpectedLocation
from .settings.mysql_settings_repository import MySQLSettingsRepository
from .settings.repository import SettingsRepository
from .settings.service import SettingsService
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository


@dataclass(frozen=True)
class Container:
    attendance_repo: AttendanceRepository
    users_repo: UserRepository
    settings_repo: SettingsRepository
    assessor: FraudAssessor

    settings_service: SettingsService
    attendance_service: AttendanceService
    sweep_service: AbsenceSweepService
    summary_service: DailySummaryService


def assemble(
    *,
    attendance_repo: AttendanceRepository,
    users_repo: UserRepository,
    settings_repo: SettingsRepository,
    assessor: FraudAssessor,
    default_location: ExpectedLocation,
) -> Container:
    """Wire services over the given repositories and assessor."""

    factory = AttendanceStrategyFactory()
    settings_service = SettingsService(settings_repo, default_location=default_location)
    return Container(
        attendance_repo=attendance_repo,
        users_repo=users_repo,
        settings_repo=settings_repo,
        assessor=assessor,
        settings_service=settings_service,
        attendance_service=AttendanceService(
            attendance_repo,
            users_repo,
            settings_service,
            assessor,
            strategy_factory=factory,
        ),
        sweep_service=AbsenceSweepService(attendance_repo, users_repo, settings_service),
        summary_service=DailySummaryService(attendance_repo, users_repo, settings_service, strategy_factory=factory),
    )


def build_container(*, settings: Any, assessor: Optional[FraudAssessor] = None) -> Container:
    """Production wiring from a settings module (see ``config/``)."""

    db_config: Mapping[str, Any] = getattr(settings, "DB_CONFIG")
    conn = DatabaseConnection(DBConfig.from_mapping(db_config))

    if assessor is None:
        assessor = GeminiFraudAssessor(
            api_key=getattr(settings, "GEMINI_API_KEY", None) or None,
            model=getattr(settings, "GEMINI_MODEL", DEFAULT_MODEL),
            timeout_seconds=float(getattr(settings, "GEMINI_TIMEOUT_SECONDS", 30)),
        )

    return assemble(
        attendance_repo=MySQLAttendanceRepository(conn),
        users_repo=MySQLUserRepository(conn),
        settings_repo=MySQLSettingsRepository(conn),
        assessor=assessor,
        default_location=ExpectedLocation(
            latitude=float(getattr(settings, "SCHOOL_LATITUDE", DEFAULT_SCHOOL_LATITUDE)),
            longitude=float(getattr(settings, "SCHOOL_LONGITUDE", DEFAULT_SCHOOL_LONGITUDE)),
            radius_meters=float(getattr(settings, "SCHOOL_RADIUS_METERS", DEFAULT_SCHOOL_RADIUS_METERS)),
        ),
    )
