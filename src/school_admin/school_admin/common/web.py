from __future__ import annotations

from datetime import date
from typing import Any, Optional

from flask import jsonify

from ..core.exceptions import AuthenticationError, AuthorizationError, DomainError, NotFoundError, ValidationError
from .datetime_utils import parse_iso_date

_STATUS_BY_ERROR = (
    (AuthenticationError, 401),
    (AuthorizationError, 403),
    (NotFoundError, 404),
    (ValidationError, 400),
)


def error_response(exc: DomainError):
    for cls, status in _STATUS_BY_ERROR:
        if isinstance(exc, cls):
            return jsonify({"error": str(exc)}), status
    return jsonify({"error": str(exc)}), 400


def parse_date_arg(value: Any, field_name: str) -> Optional[date]:
    # JSON bodies may carry numbers here.
    v = "" if value is None else str(value).strip()
    if not v:
        return None
    try:
        return parse_iso_date(v)
    except ValueError:
        raise ValidationError(f"{field_name} must be YYYY-MM-DD")
