from __future__ import annotations

from dataclasses import replace
from datetime import date
from typing import Optional, Sequence

from ..core.enums import LeaveStatus, SyncSource
from ..core.exceptions import RecordMissing
from ..database.connection import DatabaseConnection
from ..database.mysql_base import execute, mysql_time, query_all, query_one
from .model import LeaveRecord
from .repository import LeaveRepository

_COLUMNS = (
    "id, school_id, teacher_id, teacher_name, teacher_position, type, "
    "start_date, end_date, start_time, end_time, reason, contact_info, mobile_phone, "
    "evidence_url, status, teacher_signature, director_signature, approved_date, created_at"
)
_COLUMN_NAMES = tuple(c.strip() for c in _COLUMNS.split(","))


def _to_record(r: dict) -> LeaveRecord:
    row = dict(r)
    row["start_time"] = mysql_time(row.get("start_time"))
    row["end_time"] = mysql_time(row.get("end_time"))
    return LeaveRecord.from_row(row)


class MySQLLeaveRepository(LeaveRepository):
    """Primary-tier leave store.

    Updates and deletes that match no row raise ``RecordMissing``: the record
    only exists in the local tier, and the write belongs there.
    """

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self) -> Sequence[LeaveRecord]:
        rows = query_all(self._conn_factory, f"SELECT {_COLUMNS} FROM leave_requests ORDER BY created_at DESC")
        return [_to_record(r) for r in rows]

    def get(self, *, request_id: str) -> Optional[LeaveRecord]:
        r = query_one(self._conn_factory, f"SELECT {_COLUMNS} FROM leave_requests WHERE id=%s", (str(request_id),))
        return _to_record(r) if r else None

    def create(self, record: LeaveRecord) -> LeaveRecord:
        row = record.to_row()
        placeholders = ",".join(["%s"] * len(_COLUMN_NAMES))
        execute(
            self._conn_factory,
            f"INSERT INTO leave_requests({_COLUMNS}) VALUES({placeholders})",
            [row[c] for c in _COLUMN_NAMES],
        )
        return record

    def update_status(
        self,
        *,
        record: LeaveRecord,
        status: LeaveStatus,
        approved_date: date,
        director_signature: Optional[str],
    ) -> LeaveRecord:
        # No status guard in the WHERE clause: concurrent decisions are last-write-wins.
        matched = execute(
            self._conn_factory,
            "UPDATE leave_requests SET status=%s, approved_date=%s, director_signature=%s WHERE id=%s",
            (status.value, approved_date, director_signature, record.id),
        )
        if matched == 0:
            raise RecordMissing(SyncSource.SQL, record.id)
        return replace(record, status=status, approved_date=approved_date, director_signature=director_signature)

    def delete(self, *, request_id: str) -> bool:
        removed = execute(self._conn_factory, "DELETE FROM leave_requests WHERE id=%s", (str(request_id),))
        if removed == 0:
            raise RecordMissing(SyncSource.SQL, str(request_id))
        return True
