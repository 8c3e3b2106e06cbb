from __future__ import annotations

from flask import Flask, request

from ..common.responses import domain_error, ok
from ..core.exceptions import DomainError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/admin/settings", methods=["GET", "POST"], endpoint="admin_settings")
    def admin_settings():
        if request.method == "POST":
            if request.is_json:
                values = request.get_json(silent=True) or {}
            else:
                values = request.form.to_dict()
                if "off_days" in request.form:
                    values["off_days"] = request.form.getlist("off_days")
            try:
                container.settings_service.update(values)
            except DomainError as e:
                return domain_error(e)
            return ok("Settings saved", settings=container.settings_service.get_view())

        return ok(settings=container.settings_service.get_view())
