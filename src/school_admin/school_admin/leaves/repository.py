from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..core.enums import LeaveStatus
from .model import LeaveRecord


class LeaveRepository(Protocol):
    def list_all(self) -> Sequence[LeaveRecord]:
        """Return every leave record, newest first."""

        raise NotImplementedError

    def get(self, *, request_id: str) -> Optional[LeaveRecord]:
        raise NotImplementedError

    def create(self, record: LeaveRecord) -> LeaveRecord:
        raise NotImplementedError

    def update_status(
        self,
        *,
        record: LeaveRecord,
        status: LeaveStatus,
        approved_date: date,
        director_signature: Optional[str],
    ) -> LeaveRecord:
        """Apply a decision. ``record`` is the caller's latest copy.

        A remote store that does not hold the row raises ``RecordMissing``.
        """

        raise NotImplementedError

    def delete(self, *, request_id: str) -> bool:
        """Remove a record; same ``RecordMissing`` contract as ``update_status``."""

        raise NotImplementedError
