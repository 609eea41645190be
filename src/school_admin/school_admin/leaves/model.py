from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from datetime import date, datetime, time
from typing import Any, Mapping, Optional

from ..common.datetime_utils import as_date, as_datetime, parse_hhmm
from ..common.field_mapping import to_camel_keys, to_snake_keys
from ..core.enums import LeaveStatus, LeaveType

TIMED_TYPES = frozenset({LeaveType.OFF_CAMPUS, LeaveType.LATE})
DAY_COUNTED_TYPES = frozenset({LeaveType.SICK, LeaveType.PERSONAL})


@dataclass(frozen=True)
class LeaveRecord:
    """Domain entity: a teacher's leave request.

    Pure data object; backends convert it with ``to_row``/``from_row`` (SQL
    columns) and ``to_document``/``from_document`` (camel-case wire shape).
    """

    id: str
    teacher_id: str
    teacher_name: str
    type: LeaveType
    start_date: date
    end_date: date
    reason: str
    status: LeaveStatus
    created_at: datetime
    school_id: Optional[str] = None
    teacher_position: Optional[str] = None
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    contact_info: str = ""
    mobile_phone: str = ""
    evidence_url: Optional[str] = None
    teacher_signature: Optional[str] = None
    director_signature: Optional[str] = None
    approved_date: Optional[date] = None

    @property
    def is_terminal(self) -> bool:
        return self.status != LeaveStatus.PENDING

    def to_row(self) -> dict[str, Any]:
        row = asdict(self)
        row["type"] = self.type.value
        row["status"] = self.status.value
        return row

    def to_document(self) -> dict[str, Any]:
        row = self.to_row()
        row["start_date"] = self.start_date.isoformat()
        row["end_date"] = self.end_date.isoformat()
        row["start_time"] = self.start_time.strftime("%H:%M") if self.start_time else None
        row["end_time"] = self.end_time.strftime("%H:%M") if self.end_time else None
        row["approved_date"] = self.approved_date.isoformat() if self.approved_date else None
        row["created_at"] = self.created_at.isoformat(timespec="seconds")
        return to_camel_keys({k: v for k, v in row.items() if v is not None})

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "LeaveRecord":
        known = {f.name for f in fields(cls)}
        data = {k: v for k, v in row.items() if k in known}
        data["id"] = str(data["id"])
        data["teacher_id"] = str(data["teacher_id"])
        data["type"] = LeaveType(data["type"])
        data["status"] = LeaveStatus(data["status"])
        data["start_date"] = as_date(data["start_date"])
        data["end_date"] = as_date(data["end_date"])
        data["created_at"] = as_datetime(data["created_at"])
        for key in ("start_time", "end_time"):
            value = data.get(key)
            if value is not None and not isinstance(value, time):
                data[key] = parse_hhmm(str(value))
        if data.get("approved_date"):
            data["approved_date"] = as_date(data["approved_date"])
        else:
            data["approved_date"] = None
        data["contact_info"] = data.get("contact_info") or ""
        data["mobile_phone"] = data.get("mobile_phone") or ""
        return cls(**data)

    @classmethod
    def from_document(cls, doc: Mapping[str, Any]) -> "LeaveRecord":
        return cls.from_row(to_snake_keys(doc))
