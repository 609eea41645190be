from __future__ import annotations

from typing import Any

from ..core.exceptions import ValidationError


def _text(value: Any) -> str:
    return "" if value is None else str(value).strip()


def require_non_empty(value: Any, field_name: str) -> str:
    text = _text(value)
    if not text:
        raise ValidationError(f"{field_name} is required")
    return text


def optional_text(value: Any) -> str:
    return _text(value)
