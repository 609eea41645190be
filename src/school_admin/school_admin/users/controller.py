from __future__ import annotations

from functools import wraps

from flask import Flask, g, jsonify, request, session

from ..common.web import error_response
from ..container import Container
from ..core.constants import SESSION_KEY
from ..core.exceptions import AuthenticationError, DomainError, NotFoundError


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

    def _outcome_json(outcome) -> dict:
        return {
            "source": outcome.source.value,
            "message": outcome.message,
            "teacher": outcome.value.to_public_dict(),
        }

    @app.route("/session", methods=["POST"], endpoint="login")
    def login():
        payload = request.get_json(silent=True) or request.form
        try:
            user = container.auth_service.authenticate(payload.get("teacherId", ""), payload.get("password", ""))
        except AuthenticationError as e:
            return error_response(e)

        session[SESSION_KEY] = {"teacherId": user.teacher_id}
        return jsonify(
            {
                "teacherId": user.teacher_id,
                "name": user.name,
                "schoolId": user.school_id,
                "roles": list(user.roles),
                "isFirstLogin": user.is_first_login,
            }
        )

    @app.route("/session", methods=["GET"], endpoint="current_session")
    def current_session():
        stored = session.get(SESSION_KEY) or {}
        if not stored.get("teacherId"):
            return jsonify({"error": "Not logged in"}), 401
        try:
            teacher = container.auth_service.get_teacher(stored["teacherId"])
        except NotFoundError:
            # Directory may not have synced this teacher (yet).
            return jsonify({"error": "Session teacher not in directory"}), 401
        return jsonify(teacher.to_public_dict())

    @app.route("/session", methods=["DELETE"], endpoint="logout")
    def logout():
        session.pop(SESSION_KEY, None)
        return jsonify({"ok": True})

    @app.route("/register", methods=["POST"], endpoint="register_teacher")
    def register_teacher():
        payload = request.get_json(silent=True) or request.form
        try:
            outcome = container.profile_service.register(
                school_id=payload.get("schoolId", ""),
                teacher_id=payload.get("teacherId", ""),
                name=payload.get("name", ""),
            )
        except DomainError as e:
            return error_response(e)

        # New accounts start signed in and go straight to first-login setup.
        session[SESSION_KEY] = {"teacherId": outcome.value.id}
        return jsonify(_outcome_json(outcome)), 201

    @app.route("/profile/first-login", methods=["POST"], endpoint="first_login_setup")
    @login_required
    def first_login_setup():
        payload = request.get_json(silent=True) or {}
        try:
            outcome = container.profile_service.complete_first_login(
                teacher=g.teacher,
                new_password=payload.get("newPassword"),
                confirm_password=payload.get("confirmPassword"),
                position=payload.get("position", ""),
            )
        except DomainError as e:
            return error_response(e)
        return jsonify(_outcome_json(outcome))

    @app.route("/profile", methods=["PUT"], endpoint="update_profile")
    @login_required
    def update_profile():
        payload = request.get_json(silent=True) or {}
        try:
            outcome = container.profile_service.update_profile(
                teacher=g.teacher,
                name=payload.get("name", ""),
                position=payload.get("position", ""),
                password=payload.get("password"),
                signature_base64=payload.get("signatureBase64"),
            )
        except DomainError as e:
            return error_response(e)
        return jsonify(_outcome_json(outcome))
