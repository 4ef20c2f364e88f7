from __future__ import annotations

import csv
import io
from datetime import date

from flask import Flask, g, request

from ..common.datetime_utils import now_local
from ..common.http import date_value, int_value, ok, token_required
from ..container import Container
from .service import REPORT_FIELDS, ReportData


def register(app: Flask, container: Container) -> None:
    def _range() -> tuple[date, date]:
        today = now_local().date()
        start = date_value(request.args.get("start"), "start", required=False) or today.replace(day=1)
        end = date_value(request.args.get("end"), "end", required=False) or today
        return start, end

    def _build() -> tuple[ReportData, date, date]:
        start, end = _range()
        employee_id = int_value(request.args.get("employee_id"), "employee_id", required=False) or g.user.employee_id
        data = container.report_service.build_attendance_report(
            viewer_id=g.user.employee_id,
            viewer_role=g.user.role,
            employee_id=employee_id,
            start=start,
            end=end,
            now=now_local(),
        )
        return data, start, end

    def _write_report_csv(*, data: ReportData, filename: str):
        out = io.StringIO()
        writer = csv.DictWriter(out, fieldnames=REPORT_FIELDS)
        writer.writeheader()
        for row in data.rows:
            writer.writerow(row)

        csv_bytes = out.getvalue().encode("utf-8-sig")
        return app.response_class(
            csv_bytes,
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={filename}"},
        )

    @app.route("/api/reports/attendance", methods=["GET"], endpoint="report_attendance")
    @token_required
    def attendance_report():
        data, _, _ = _build()
        return ok(summary=data.summary, days=data.rows)

    @app.route("/api/reports/attendance.csv", methods=["GET"], endpoint="report_attendance_csv")
    @token_required
    def attendance_report_csv():
        data, start, end = _build()
        filename = f"attendance_{data.summary['employee_id']}_{start.strftime('%Y%m%d')}_{end.strftime('%Y%m%d')}.csv"
        return _write_report_csv(data=data, filename=filename)

    @app.route("/api/days/<day>", methods=["GET"], endpoint="resolve_day")
    @token_required
    def resolve_one_day(day: str):
        resolved = container.day_service.resolve(g.user.employee_id, date_value(day, "date"), now_local())
        return ok(day=resolved.to_dict())
