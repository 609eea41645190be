from __future__ import annotations

from datetime import date, timedelta
from functools import wraps

from flask import Flask, jsonify, request, session

from ..common.datetime_utils import today_local
from ..common.web import error_response, parse_date_arg
from ..container import Container
from ..core.constants import DEFAULT_REPORT_DAYS, SESSION_KEY
from ..core.exceptions import NotFoundError, ValidationError


def _default_start(end: date) -> date:
    try:
        return end - timedelta(days=DEFAULT_REPORT_DAYS - 1)
    except OverflowError:
        return date.min


def register(app: Flask, container: Container) -> None:
    def viewer_required(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            stored = session.get(SESSION_KEY) or {}
            if not stored.get("teacherId"):
                return jsonify({"error": "Please log in to continue"}), 401
            try:
                teacher = container.auth_service.get_teacher(stored["teacherId"])
            except NotFoundError:
                return jsonify({"error": "Session teacher not in directory"}), 401
            if not teacher.can_view_all:
                return jsonify({"error": "You do not have permission"}), 403
            return view(teacher, *args, **kwargs)

        return wrapper

    @app.route("/reports/leaves", methods=["GET"], endpoint="leave_report")
    @viewer_required
    def leave_report(viewer):
        try:
            end = parse_date_arg(request.args.get("end"), "end") or today_local()
            start = parse_date_arg(request.args.get("start"), "start") or _default_start(end)
        except ValidationError as e:
            return error_response(e)

        report = container.leave_report_service.build_leave_report(start=start, end=end, school_id=viewer.school_id)
        return jsonify(
            {
                "start": start.isoformat(),
                "end": end.isoformat(),
                "workingDays": report.working_days,
                "summary": report.summary,
                "rows": report.rows,
            }
        )
