from __future__ import annotations

from datetime import date, timedelta

from flask import Flask, request

from ..common.datetime_utils import parse_iso_date
from ..common.responses import fail, ok
from ..container import Container


def period_start(period: str, today: date) -> date:
    """First day of today/week/month/year (weeks start on Sunday)."""

    if period == "week":
        return today - timedelta(days=(today.weekday() + 1) % 7)
    if period == "month":
        return today.replace(day=1)
    if period == "year":
        return today.replace(month=1, day=1)
    return today


def register(app: Flask, container: Container) -> None:
    @app.route("/admin/summary", methods=["GET"], endpoint="admin_summary")
    def admin_summary():
        try:
            day = parse_iso_date(request.args["date"]) if request.args.get("date") else date.today()
        except ValueError:
            return fail("Invalid date", 400)
        return ok(summary=container.summary_service.summarize(day).to_dict())

    @app.route("/admin/report", methods=["GET"], endpoint="admin_report")
    def admin_report():
        today = date.today()
        try:
            if request.args.get("start") and request.args.get("end"):
                start = parse_iso_date(request.args["start"])
                end = parse_iso_date(request.args["end"])
            else:
                start, end = period_start(request.args.get("period", "today"), today), today
        except ValueError:
            return fail("Invalid start/end", 400)
        if start > end:
            return fail("start must not be after end", 400)
        return ok(report=container.summary_service.period_report(start, end).to_dict())
