from __future__ import annotations

import re
from datetime import date

from flask import Flask, jsonify, request, send_file

from ..common.http import json_errors
from ..container import Container
from ..core.exceptions import ValidationError
from .classification import classify, summarize
from .export import (
    XLSX_MIMETYPE,
    build_absence_workbook,
    build_attendance_csv,
    build_attendance_workbook,
    build_presence_workbook,
)

# ?only= value -> filename suffix
_SINGLE_SHEET_SUFFIXES = {"present": "_presenca", "absent": "_faltaram"}


def _safe_filename(name: str) -> str:
    return re.sub(r"[^a-zA-Z0-9\-_ ]", "", name or "") or "evento"


def register(app: Flask, container: Container) -> None:
    service = container.attendance_service

    @app.route("/api/events/attendance", methods=["GET"], endpoint="event_attendance")
    @json_errors
    def event_attendance():
        report = service.build_report(request.args.get("eventId"))
        return jsonify(
            {
                "items": [{**r.to_dict(), "status": classify(r).value} for r in report.records],
                "days": [d.isoformat() for d in report.days],
                "multiDay": report.is_multi_day,
                "summary": summarize(report.records),
            }
        )

    @app.route("/api/events/<event_id>/attendance.xlsx", methods=["GET"], endpoint="event_attendance_xlsx")
    @json_errors
    def event_attendance_xlsx(event_id: str):
        only = request.args.get("only")
        if only and only not in _SINGLE_SHEET_SUFFIXES:
            raise ValidationError("only must be 'present' or 'absent'")

        report = service.build_report(event_id)
        if only == "present":
            buf = build_presence_workbook(report, container.timezone)
        elif only == "absent":
            buf = build_absence_workbook(report)
        else:
            buf = build_attendance_workbook(report, container.timezone)
        suffix = _SINGLE_SHEET_SUFFIXES.get(only, "")
        filename = f"{_safe_filename(report.event.name)}{suffix}_{date.today().isoformat()}.xlsx"
        return send_file(buf, mimetype=XLSX_MIMETYPE, as_attachment=True, download_name=filename)

    @app.route("/api/events/<event_id>/attendance.csv", methods=["GET"], endpoint="event_attendance_csv")
    @json_errors
    def event_attendance_csv(event_id: str):
        report = service.build_report(event_id)
        filename = f"{_safe_filename(report.event.name)}_{date.today().isoformat()}.csv"
        return app.response_class(
            build_attendance_csv(report, container.timezone),
            mimetype="text/csv",
            headers={"Content-Disposition": f'attachment; filename="{filename}"'},
        )
