from __future__ import annotations

import csv
import io
import logging
from datetime import date

from flask import Flask, request

from ..common.datetime_utils import parse_iso_date
from ..common.responses import domain_error, fail, ok
from ..core.enums import AttendanceStatus, Role
from ..core.exceptions import DomainError
from ..container import Container

logger = logging.getLogger(__name__)

_CSV_FIELDS = [
    "work_date",
    "user_id",
    "name",
    "role",
    "check_in",
    "check_out",
    "status",
    "is_fraudulent",
    "fraud_reason",
]


def register(app: Flask, container: Container) -> None:
    def _payload() -> dict:
        return request.get_json(silent=True) or request.form.to_dict()

    def _day_arg() -> date:
        value = request.args.get("date")
        return parse_iso_date(value) if value else date.today()

    @app.route("/api/checkin", methods=["POST"], endpoint="api_checkin")
    def api_checkin():
        data = _payload()
        try:
            result = container.attendance_service.check_in(
                data.get("user_id"),
                photo_data_uri=data.get("photo_data_uri"),
                latitude=data.get("latitude"),
                longitude=data.get("longitude"),
            )
        except DomainError as e:
            return domain_error(e)
        except Exception:
            logger.exception("Check-in failed")
            return fail("Server error during check-in", 500)

        rec = result.record
        return ok(
            result.message,
            attendance_id=rec.attendance_id,
            status=rec.status.value,
            is_fraudulent=rec.is_fraudulent,
            reason=rec.fraud_reason,
            requires_manual_verification=result.requires_manual_verification,
        )

    @app.route("/api/checkout", methods=["POST"], endpoint="api_checkout")
    def api_checkout():
        data = _payload()
        try:
            record = container.attendance_service.check_out(data.get("user_id"), data.get("attendance_id"))
        except DomainError as e:
            return domain_error(e)
        except Exception:
            logger.exception("Check-out failed")
            return fail("Server error during check-out", 500)
        return ok("Checked out", attendance_id=record.attendance_id, check_out=record.check_out_time.strftime("%H:%M:%S"))

    @app.route("/api/attendance/history", methods=["GET"], endpoint="api_attendance_history")
    def api_attendance_history():
        user_id = request.args.get("user_id", "")
        if not user_id:
            return fail("user_id is required", 400)
        rows = container.attendance_service.history(user_id)
        return ok(rows=[r.to_dict() for r in rows])

    @app.route("/admin/attendance", methods=["GET"], endpoint="admin_attendance")
    def admin_attendance():
        try:
            day = _day_arg()
            role = Role(request.args.get("role", Role.TEACHER.value))
            status_s = request.args.get("status")
            status = AttendanceStatus(status_s) if status_s else None
        except ValueError:
            return fail("Invalid date, role or status filter", 400)

        rows = container.attendance_service.list_for_day(
            day,
            role=role,
            status=status,
            fraud_only=request.args.get("fraud") in {"1", "true"},
        )
        return ok(date=day.strftime("%Y-%m-%d"), rows=[r.to_dict() for r in rows])

    @app.route("/admin/attendance.csv", methods=["GET"], endpoint="admin_attendance_csv")
    def admin_attendance_csv():
        try:
            day = _day_arg()
        except ValueError:
            return fail("Invalid date", 400)

        out = io.StringIO()
        writer = csv.DictWriter(out, fieldnames=_CSV_FIELDS, extrasaction="ignore")
        writer.writeheader()
        for row in container.attendance_service.list_for_day(day):
            item = row.to_dict()
            item["check_in"] = item["check_in"] or "-"
            item["check_out"] = item["check_out"] or "-"
            writer.writerow(item)

        filename = f"teacher_attendance_{day.strftime('%Y%m%d')}.csv"
        return app.response_class(
            out.getvalue().encode("utf-8-sig"),
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={filename}"},
        )

    @app.route("/admin/attendance/sweep", methods=["POST"], endpoint="admin_attendance_sweep")
    def admin_attendance_sweep():
        try:
            created = container.sweep_service.run()
        except DomainError as e:
            return domain_error(e)
        return ok(f"{created} absence record(s) created", created=created)
