from __future__ import annotations

from functools import wraps

from flask import Flask, g, jsonify, request, session

from ..common.web import error_response, parse_date_arg
from ..container import Container
from ..core.constants import SESSION_KEY
from ..core.exceptions import DomainError, NotFoundError, ValidationError
from .stats import DateRange


def register(app: Flask, container: Container) -> None:
    def login_required(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            stored = session.get(SESSION_KEY) or {}
            if not stored.get("teacherId"):
                return jsonify({"error": "Please log in to continue"}), 401
            try:
                g.teacher = container.auth_service.get_teacher(stored["teacherId"])
            except NotFoundError:
                return jsonify({"error": "Session teacher not in directory"}), 401
            return view(*args, **kwargs)

        return wrapper

    def _record_json(record) -> dict:
        return record.to_document()

    def _outcome_json(outcome, **extra) -> dict:
        return {"source": outcome.source.value, "message": outcome.message, **extra}

    @app.route("/leaves", methods=["GET"], endpoint="list_leaves")
    @login_required
    def list_leaves():
        data = container.leave_service.list_visible(g.teacher)
        return jsonify(
            {
                "pending": [_record_json(r) for r in data["pending"]],
                "history": [_record_json(r) for r in data["history"]],
            }
        )

    @app.route("/leaves", methods=["POST"], endpoint="submit_leave")
    @login_required
    def submit_leave():
        payload = request.get_json(silent=True) or {}
        try:
            start_date = parse_date_arg(payload.get("startDate"), "startDate")
            end_date = parse_date_arg(payload.get("endDate"), "endDate") or start_date
            if start_date is None:
                raise ValidationError("startDate is required")

            result = container.leave_service.submit_request(
                teacher=g.teacher,
                leave_type=payload.get("type", ""),
                start_date=start_date,
                end_date=end_date,
                reason=payload.get("reason", ""),
                start_time=payload.get("startTime", ""),
                end_time=payload.get("endTime", ""),
                contact_info=payload.get("contactInfo", ""),
                mobile_phone=payload.get("mobilePhone", ""),
                evidence_url=payload.get("evidenceUrl"),
            )
        except DomainError as e:
            return error_response(e)

        body = _outcome_json(result.outcome, record=_record_json(result.record))
        if result.off_campus_count is not None:
            body["offCampusCount"] = result.off_campus_count
        return jsonify(body), 201

    def _decide(request_id: str, approve: bool):
        try:
            outcome = container.leave_service.decide(director=g.teacher, request_id=request_id, approve=approve)
        except DomainError as e:
            return error_response(e)
        return jsonify(_outcome_json(outcome, record=_record_json(outcome.value)))

    @app.route("/leaves/<request_id>/approve", methods=["POST"], endpoint="approve_leave")
    @login_required
    def approve_leave(request_id: str):
        return _decide(request_id, True)

    @app.route("/leaves/<request_id>/reject", methods=["POST"], endpoint="reject_leave")
    @login_required
    def reject_leave(request_id: str):
        return _decide(request_id, False)

    @app.route("/leaves/<request_id>", methods=["DELETE"], endpoint="delete_leave")
    @login_required
    def delete_leave(request_id: str):
        try:
            outcome = container.leave_service.delete_request(actor=g.teacher, request_id=request_id)
        except DomainError as e:
            return error_response(e)
        return jsonify(_outcome_json(outcome, deleted=bool(outcome.value)))

    @app.route("/leaves/<request_id>/summary", methods=["GET"], endpoint="leave_summary")
    @login_required
    def leave_summary(request_id: str):
        try:
            summary = container.leave_service.form_summary(request_id)
        except DomainError as e:
            return error_response(e)

        directors = container.auth_service.directors_of(g.teacher.school_id)
        return jsonify(
            {
                "currentDays": summary.current_days,
                "prevSickDays": summary.prev_sick_days,
                "prevPersonalDays": summary.prev_personal_days,
                "prevLate": summary.prev_late,
                "prevOffCampus": summary.prev_off_campus,
                "lastLeave": _record_json(summary.last_leave) if summary.last_leave else None,
                "lastLeaveDays": summary.last_leave_days,
                "directorName": directors[0].name if directors else None,
            }
        )

    @app.route("/leaves/stats/<teacher_id>", methods=["GET"], endpoint="leave_stats")
    @login_required
    def leave_stats(teacher_id: str):
        if teacher_id != g.teacher.id and not g.teacher.can_view_all:
            return jsonify({"error": "You do not have permission"}), 403
        try:
            start = parse_date_arg(request.args.get("start"), "start")
            end = parse_date_arg(request.args.get("end"), "end")
        except ValidationError as e:
            return error_response(e)

        window = DateRange(start=start, end=end) if start and end else None
        stats = container.leave_service.teacher_stats(teacher_id, window)
        return jsonify({"teacherId": teacher_id, **stats.as_dict()})
