"""Leave accounting: working-day counts and per-teacher aggregates.

All functions here are pure: they never mutate the record collections they are
given and depend only on their arguments.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Iterable, Optional, Sequence

from ..core.enums import LeaveStatus, LeaveType
from .model import DAY_COUNTED_TYPES, LeaveRecord

_SATURDAY = 5


@dataclass(frozen=True)
class DateRange:
    start: date
    end: date

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end


@dataclass(frozen=True)
class LeaveStats:
    sick: int = 0
    personal: int = 0
    off_campus: int = 0
    late: int = 0
    total_requests: int = 0
    total_leave_days: int = 0
    raw_data: tuple[LeaveRecord, ...] = field(default=(), repr=False)

    def as_dict(self) -> dict:
        return {
            "sick": self.sick,
            "personal": self.personal,
            "offCampus": self.off_campus,
            "late": self.late,
            "totalRequests": self.total_requests,
            "totalLeaveDays": self.total_leave_days,
        }


@dataclass(frozen=True)
class LeaveHistorySummary:
    """Figures printed on the official leave form for one request."""

    current_days: int
    prev_sick_days: int
    prev_personal_days: int
    prev_late: int
    prev_off_campus: int
    last_leave: Optional[LeaveRecord]
    last_leave_days: int


def count_working_days(start: date, end: date) -> int:
    """Count Monday-Friday days in the inclusive range ``[start, end]``."""
    if start > end:
        return 0
    span = (end - start).days + 1
    full_weeks, remainder = divmod(span, 7)
    first = start.weekday()
    # Leftover days start on the same weekday as ``start``.
    extra = sum(1 for offset in range(remainder) if (first + offset) % 7 < _SATURDAY)
    return full_weeks * 5 + extra


def leave_days(start: date, end: date) -> int:
    """Calendar days spanned by a leave, tolerant of swapped bounds."""
    return abs((end - start).days) + 1


def _approved_for(teacher_id: str, records: Iterable[LeaveRecord]) -> list[LeaveRecord]:
    return [r for r in records if r.teacher_id == teacher_id and r.status == LeaveStatus.APPROVED]


def calculate_stats(
    teacher_id: str,
    records: Iterable[LeaveRecord],
    date_range: Optional[DateRange] = None,
) -> LeaveStats:
    approved = _approved_for(teacher_id, records)
    if date_range is not None:
        approved = [r for r in approved if date_range.contains(r.start_date)]

    counts = {t: 0 for t in LeaveType}
    total_days = 0
    for r in approved:
        counts[r.type] += 1
        if r.type in DAY_COUNTED_TYPES:
            total_days += leave_days(r.start_date, r.end_date)

    return LeaveStats(
        sick=counts[LeaveType.SICK],
        personal=counts[LeaveType.PERSONAL],
        off_campus=counts[LeaveType.OFF_CAMPUS],
        late=counts[LeaveType.LATE],
        total_requests=len(approved),
        total_leave_days=total_days,
        raw_data=tuple(approved),
    )


def present_days(working_days: int, stats: LeaveStats) -> int:
    # Not clamped: leave exceeding the window yields a negative figure.
    return working_days - stats.total_leave_days


def summarize_leave_history(record: LeaveRecord, records: Sequence[LeaveRecord]) -> LeaveHistorySummary:
    previous = [r for r in _approved_for(record.teacher_id, records) if r.id != record.id]
    previous.sort(key=lambda r: r.created_at, reverse=True)

    def _days_of(leave_type: LeaveType) -> int:
        return sum(leave_days(r.start_date, r.end_date) for r in previous if r.type == leave_type)

    last = previous[0] if previous else None
    return LeaveHistorySummary(
        current_days=leave_days(record.start_date, record.end_date),
        prev_sick_days=_days_of(LeaveType.SICK),
        prev_personal_days=_days_of(LeaveType.PERSONAL),
        prev_late=sum(1 for r in previous if r.type == LeaveType.LATE),
        prev_off_campus=sum(1 for r in previous if r.type == LeaveType.OFF_CAMPUS),
        last_leave=last,
        last_leave_days=leave_days(last.start_date, last.end_date) if last else 0,
    )


def count_off_campus(teacher_id: str, records: Iterable[LeaveRecord]) -> int:
    return sum(1 for r in records if r.teacher_id == teacher_id and r.type == LeaveType.OFF_CAMPUS)
