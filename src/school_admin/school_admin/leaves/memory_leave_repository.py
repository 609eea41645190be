from __future__ import annotations

from dataclasses import replace
from datetime import date
from typing import Iterable, Optional, Sequence

from ..core.enums import LeaveStatus
from .model import LeaveRecord
from .repository import LeaveRepository


class InMemoryLeaveRepository(LeaveRepository):
    """Local tier: the terminal fallback, never raises on writes."""

    def __init__(self, records: Iterable[LeaveRecord] = ()):
        self._records: dict[str, LeaveRecord] = {r.id: r for r in records}
        self._deleted: set[str] = set()

    @property
    def deleted_ids(self) -> frozenset[str]:
        """Ids deleted while offline; hidden from merged primary reads."""
        return frozenset(self._deleted)

    def load(self, records: Iterable[LeaveRecord]) -> None:
        for r in records:
            self._records.setdefault(r.id, r)

    def list_all(self) -> Sequence[LeaveRecord]:
        return sorted(self._records.values(), key=lambda r: r.created_at, reverse=True)

    def get(self, *, request_id: str) -> Optional[LeaveRecord]:
        return self._records.get(str(request_id))

    def create(self, record: LeaveRecord) -> LeaveRecord:
        self._deleted.discard(record.id)
        self._records[record.id] = record
        return record

    def update_status(
        self,
        *,
        record: LeaveRecord,
        status: LeaveStatus,
        approved_date: date,
        director_signature: Optional[str],
    ) -> LeaveRecord:
        base = self._records.get(record.id, record)
        updated = replace(base, status=status, approved_date=approved_date, director_signature=director_signature)
        self._records[record.id] = updated
        return updated

    def delete(self, *, request_id: str) -> bool:
        self._deleted.add(str(request_id))
        self._records.pop(str(request_id), None)
        return True
