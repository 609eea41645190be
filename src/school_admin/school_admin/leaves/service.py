from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Callable, Optional, Sequence

from ..common.datetime_utils import now_local, parse_hhmm
from ..common.validators import optional_text, require_non_empty
from ..core.enums import LeaveStatus, LeaveType, SyncSource, TeacherRole
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..sync.orchestrator import SyncOrchestrator, WriteOutcome
from ..users.model import Teacher
from .memory_leave_repository import InMemoryLeaveRepository
from .model import TIMED_TYPES, LeaveRecord
from .repository import LeaveRepository
from .stats import DateRange, LeaveHistorySummary, LeaveStats, calculate_stats, count_off_campus, summarize_leave_history

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SubmitResult:
    outcome: WriteOutcome[LeaveRecord]
    off_campus_count: Optional[int] = None

    @property
    def record(self) -> LeaveRecord:
        return self.outcome.value


class LeaveService:
    """Use cases: submit, decide, delete and view leave requests."""

    def __init__(
        self,
        orchestrator: SyncOrchestrator,
        local: InMemoryLeaveRepository,
        primary: Optional[LeaveRepository] = None,
        *,
        clock: Callable[[], datetime] = now_local,
        id_factory: Callable[[], str] = lambda: uuid.uuid4().hex,
    ):
        self._orchestrator = orchestrator
        self._local = local
        self._primary = primary
        self._clock = clock
        self._id_factory = id_factory

    # -------- Reads --------
    def list_records(self) -> list[LeaveRecord]:
        result = self._orchestrator.read(
            primary=self._primary.list_all if self._primary else None,
            local=self._local.list_all,
        )
        if result.source == SyncSource.SQL:
            return self._overlay_local(result.value)
        return list(result.value)

    def _overlay_local(self, remote: Sequence[LeaveRecord]) -> list[LeaveRecord]:
        # Offline writes are never replayed remotely, so the local copy wins by id.
        merged = {r.id: r for r in remote}
        for r in self._local.list_all():
            merged[r.id] = r
        for deleted in self._local.deleted_ids:
            merged.pop(deleted, None)
        return sorted(merged.values(), key=lambda r: r.created_at, reverse=True)

    def get_record(self, request_id: str) -> LeaveRecord:
        for r in self.list_records():
            if r.id == str(request_id):
                return r
        raise NotFoundError("Leave request not found")

    def list_visible(self, viewer: Teacher) -> dict[str, list[LeaveRecord]]:
        records = [r for r in self.list_records() if not r.school_id or r.school_id == viewer.school_id]
        if not viewer.can_view_all:
            records = [r for r in records if r.teacher_id == viewer.id]
        return {
            "pending": [r for r in records if r.status == LeaveStatus.PENDING],
            "history": [r for r in records if r.status != LeaveStatus.PENDING],
        }

    def teacher_stats(self, teacher_id: str, date_range: Optional[DateRange] = None) -> LeaveStats:
        return calculate_stats(str(teacher_id), self.list_records(), date_range)

    def form_summary(self, request_id: str) -> LeaveHistorySummary:
        records = self.list_records()
        record = next((r for r in records if r.id == str(request_id)), None)
        if record is None:
            raise NotFoundError("Leave request not found")
        return summarize_leave_history(record, records)

    def off_campus_count(self, teacher_id: str) -> int:
        return count_off_campus(str(teacher_id), self.list_records())

    # -------- Submission --------
    @staticmethod
    def _parse_type(value) -> LeaveType:
        try:
            return LeaveType(value)
        except ValueError:
            raise ValidationError(f"Unknown leave type: {value!r}")

    @staticmethod
    def _parse_time(value) -> Optional[time]:
        if isinstance(value, time):
            return value
        try:
            return parse_hhmm(value)
        except ValueError:
            raise ValidationError("Invalid time (HH:MM)")

    def submit_request(
        self,
        *,
        teacher: Teacher,
        leave_type,
        start_date: date,
        end_date: date,
        reason: str,
        start_time="",
        end_time="",
        contact_info: str = "",
        mobile_phone: str = "",
        evidence_url: Optional[str] = None,
    ) -> SubmitResult:
        leave_type = self._parse_type(leave_type)
        if end_date < start_date:
            raise ValidationError("End date must be on or after start date")
        reason = require_non_empty(reason, "Reason")

        start_t = self._parse_time(start_time) if leave_type in TIMED_TYPES else None
        end_t = self._parse_time(end_time) if leave_type == LeaveType.OFF_CAMPUS else None
        if leave_type in TIMED_TYPES and start_t is None:
            raise ValidationError("Start time is required for this leave type")

        warning = self.off_campus_count(teacher.id) if leave_type == LeaveType.OFF_CAMPUS else None

        record = LeaveRecord(
            id=self._id_factory(),
            school_id=teacher.school_id or None,
            teacher_id=teacher.id,
            teacher_name=teacher.name,
            teacher_position=teacher.position or None,
            type=leave_type,
            start_date=start_date,
            end_date=end_date,
            start_time=start_t,
            end_time=end_t,
            reason=reason,
            contact_info=optional_text(contact_info),
            mobile_phone=optional_text(mobile_phone),
            evidence_url=optional_text(evidence_url) or None,
            status=LeaveStatus.PENDING,
            teacher_signature=teacher.name,
            created_at=self._clock().replace(microsecond=0),
        )

        outcome = self._orchestrator.write(
            primary=(lambda: self._primary.create(record)) if self._primary else None,
            local=lambda: self._local.create(record),
        )
        logger.info("leave %s submitted by %s via %s", record.id, teacher.id, outcome.source.value)
        return SubmitResult(outcome=outcome, off_campus_count=warning)

    # -------- Director decisions --------
    def decide(self, *, director: Teacher, request_id: str, approve: bool) -> WriteOutcome[LeaveRecord]:
        if not director.is_director:
            raise AuthorizationError("Only a director can decide leave requests")

        record = self.get_record(request_id)
        if record.is_terminal:
            raise ValidationError("Leave request has already been decided")

        status = LeaveStatus.APPROVED if approve else LeaveStatus.REJECTED
        approved_date = self._clock().date()
        signature = director.name if approve else None

        def _apply(repo: LeaveRepository) -> LeaveRecord:
            return repo.update_status(
                record=record,
                status=status,
                approved_date=approved_date,
                director_signature=signature,
            )

        def _apply_remote() -> LeaveRecord:
            updated = _apply(self._primary)
            # Keep an offline copy in step so it does not shadow the decision on reads.
            if self._local.get(request_id=record.id) is not None:
                _apply(self._local)
            return updated

        outcome = self._orchestrator.write(
            primary=_apply_remote if self._primary else None,
            local=lambda: _apply(self._local),
        )
        logger.info("leave %s %s by %s via %s", record.id, status.value, director.id, outcome.source.value)
        return outcome

    def approve(self, *, director: Teacher, request_id: str) -> WriteOutcome[LeaveRecord]:
        return self.decide(director=director, request_id=request_id, approve=True)

    def reject(self, *, director: Teacher, request_id: str) -> WriteOutcome[LeaveRecord]:
        return self.decide(director=director, request_id=request_id, approve=False)

    # -------- Administrative --------
    def delete_request(self, *, actor: Teacher, request_id: str) -> WriteOutcome[bool]:
        if not actor.has_role(TeacherRole.DIRECTOR, TeacherRole.SYSTEM_ADMIN):
            raise AuthorizationError("Only a director or system admin can delete leave requests")

        record = self.get_record(request_id)

        def _delete_remote() -> bool:
            removed = self._primary.delete(request_id=record.id)
            if self._local.get(request_id=record.id) is not None:
                self._local.delete(request_id=record.id)
            return removed

        outcome = self._orchestrator.write(
            primary=_delete_remote if self._primary else None,
            local=lambda: self._local.delete(request_id=record.id),
        )
        logger.info("leave %s deleted by %s via %s", record.id, actor.id, outcome.source.value)
        return outcome
