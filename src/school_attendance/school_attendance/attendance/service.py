from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from datetime import date, datetime
from typing import Callable, Optional

from ..common.datetime_utils import format_hhmm, now_local
from ..common.validators import decode_photo_data_uri, require_coordinate, require_non_empty
from ..core.constants import DEFAULT_HISTORY_LIMIT
from ..core.enums import AttendanceStatus, Role
from ..core.exceptions import InferenceServiceError, NotFoundError, ValidationError
from ..fraud.assessor import FraudAssessor
from ..fraud.model import CheckInSubmission
from ..settings.service import SettingsService
from ..users.repository import UserRepository
from .factory import AttendanceStrategyFactory
from .model import AttendanceRecord, CheckInResult, GeoPoint
from .repository import AttendanceRepository
from .status import is_off_day, resolve_for_display

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AttendanceRow:
    """A record together with the status shown for it right now."""

    record: AttendanceRecord
    display_status: AttendanceStatus

    def to_dict(self) -> dict:
        r = self.record
        return {
            "attendance_id": r.attendance_id,
            "user_id": r.user_id,
            "name": r.name,
            "role": r.role.value,
            "work_date": r.work_date.strftime("%Y-%m-%d"),
            "check_in": r.check_in_time.strftime("%H:%M:%S") if r.check_in_time else None,
            "check_out": r.check_out_time.strftime("%H:%M:%S") if r.check_out_time else None,
            "location": (
                {"latitude": r.check_in_location.latitude, "longitude": r.check_in_location.longitude}
                if r.check_in_location
                else None
            ),
            "status": self.display_status.value,
            "stored_status": r.status.value,
            "is_fraudulent": r.is_fraudulent,
            "fraud_reason": r.fraud_reason,
        }


class AttendanceService:
    """Use cases around a check-in: validate, assess, classify, persist."""

    def __init__(
        self,
        attendance: AttendanceRepository,
        users: UserRepository,
        settings: SettingsService,
        assessor: FraudAssessor,
        *,
        strategy_factory: AttendanceStrategyFactory | None = None,
        id_factory: Callable[[], str] | None = None,
    ):
        self._attendance = attendance
        self._users = users
        self._settings = settings
        self._assessor = assessor
        self._factory = strategy_factory or AttendanceStrategyFactory()
        self._new_id = id_factory or (lambda: uuid.uuid4().hex)

    def check_in(
        self,
        user_id: str,
        *,
        photo_data_uri: str | None,
        latitude,
        longitude,
        now: datetime | None = None,
    ) -> CheckInResult:
        # Reject malformed submissions before any external call.
        user_id = require_non_empty(user_id, "User id")
        lat = require_coordinate(latitude, "Latitude", limit=90)
        lng = require_coordinate(longitude, "Longitude", limit=180)
        photo, mime_type = decode_photo_data_uri(photo_data_uri)

        user = self._users.get_by_id(user_id)
        if not user:
            raise NotFoundError("User does not exist")
        if user.role == Role.ADMIN:
            raise ValidationError("Admins do not check in")

        now = now or now_local()
        today = now.date()
        config = self._settings.get_window_config()
        if is_off_day(today, config):
            raise ValidationError("Today is an off-day, attendance is not tracked")

        if self._attendance.get_for_user_and_date(user_id, today):
            raise ValidationError("You have already checked in today")

        submission = CheckInSubmission(photo=photo, photo_mime_type=mime_type, latitude=lat, longitude=lng)
        try:
            verdict = self._assessor.assess(submission, self._settings.get_expected_location())
        except InferenceServiceError:
            logger.warning("Check-in for user %s not recorded: fraud assessment unavailable", user_id)
            raise

        strategy = self._factory.for_checkin(check_in_time=now, config=config, is_fraudulent=verdict.is_fraudulent)
        decision = strategy.decide_checkin(check_in_time=now, config=config)

        record = AttendanceRecord(
            attendance_id=self._new_id(),
            user_id=user.user_id,
            name=user.name,
            role=user.role,
            work_date=today,
            status=decision.status,
            check_in_time=now,
            check_in_location=GeoPoint(latitude=lat, longitude=lng),
            is_fraudulent=verdict.is_fraudulent,
            fraud_reason=verdict.reason if verdict.is_fraudulent else "",
        )
        self._attendance.create(record)

        if verdict.is_fraudulent:
            logger.warning("Check-in %s for user %s flagged: %s", record.attendance_id, user_id, verdict.reason)
            return CheckInResult(
                record=record,
                requires_manual_verification=True,
                message=f"Check-in requires manual verification: {verdict.reason}",
            )

        logger.info("Check-in %s for user %s recorded as %s", record.attendance_id, user_id, record.status.value)
        return CheckInResult(
            record=record,
            requires_manual_verification=False,
            message=f"Attendance recorded as {record.status.value}",
        )

    def check_out(self, user_id: str, attendance_id: str, *, now: datetime | None = None) -> AttendanceRecord:
        """Stamp the check-out time. The stored status never changes here."""

        user_id = require_non_empty(user_id, "User id")
        attendance_id = require_non_empty(attendance_id, "Attendance id")
        now = now or now_local()

        record = self._attendance.get_by_id(attendance_id)
        if not record or record.user_id != user_id:
            raise NotFoundError("Attendance record not found")
        if record.status == AttendanceStatus.ABSENT:
            raise ValidationError("An absence cannot be checked out")
        if record.check_out_time is not None:
            raise ValidationError("You have already checked out")

        config = self._settings.get_window_config()
        if record.work_date == now.date() and now.time() < config.check_out_start:
            raise ValidationError(f"Check-out opens at {format_hhmm(config.check_out_start)}")

        self._attendance.set_checkout(attendance_id=attendance_id, check_out_time=now)
        logger.info("Check-out %s for user %s", attendance_id, user_id)
        return self._attendance.get_by_id(attendance_id) or record

    def history(self, user_id: str, *, now: datetime | None = None, limit: int = DEFAULT_HISTORY_LIMIT) -> list[AttendanceRow]:
        now = now or now_local()
        config = self._settings.get_window_config()
        return [
            AttendanceRow(r, resolve_for_display(r, config, now, factory=self._factory))
            for r in self._attendance.list_for_user(user_id, limit)
        ]

    def list_for_day(
        self,
        day: date,
        *,
        role: Role = Role.TEACHER,
        now: datetime | None = None,
        status: Optional[AttendanceStatus] = None,
        fraud_only: bool = False,
    ) -> list[AttendanceRow]:
        """Admin view of one day, filtered on the displayed status."""

        now = now or now_local()
        config = self._settings.get_window_config()
        rows = [
            AttendanceRow(r, resolve_for_display(r, config, now, factory=self._factory))
            for r in self._attendance.list_by_date_range_and_role(start_date=day, end_date=day, role=role)
        ]
        if fraud_only:
            rows = [row for row in rows if row.record.is_fraudulent]
        if status is not None:
            rows = [row for row in rows if row.display_status == status]
        return rows
