from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..leaves.service import LeaveService
from ..leaves.stats import DateRange, calculate_stats, count_working_days, leave_days, present_days
from ..sync.context import SyncContext


@dataclass(frozen=True)
class ReportData:
    rows: list[dict]
    summary: list[dict]
    working_days: int


class LeaveReportService:
    def __init__(self, leaves: LeaveService, context: SyncContext):
        self._leaves = leaves
        self._context = context

    def build_leave_report(
        self,
        *,
        start: date,
        end: date,
        school_id: Optional[str] = None,
    ) -> ReportData:
        window = DateRange(start=start, end=end)
        working = count_working_days(start, end)
        records = self._leaves.list_records()

        teachers = [t for t in self._context.teachers if school_id is None or t.school_id == school_id]

        out_rows: list[dict] = []
        summary: list[dict] = []
        for t in teachers:
            stats = calculate_stats(t.id, records, window)

            for r in stats.raw_data:
                out_rows.append(
                    {
                        "id": r.id,
                        "teacher_id": t.id,
                        "teacher_name": t.name,
                        "type": r.type.value,
                        "start_date": r.start_date.strftime("%Y-%m-%d"),
                        "end_date": r.end_date.strftime("%Y-%m-%d"),
                        "start_time": r.start_time.strftime("%H:%M") if r.start_time else "-",
                        "end_time": r.end_time.strftime("%H:%M") if r.end_time else "-",
                        "days": leave_days(r.start_date, r.end_date),
                        "reason": r.reason,
                    }
                )

            present = present_days(working, stats)
            summary.append(
                {
                    "teacher_id": t.id,
                    "teacher_name": t.name,
                    "position": t.position or "-",
                    **stats.as_dict(),
                    "working_days": working,
                    "present_days": present,
                    "present_days_negative": present < 0,
                }
            )

        summary.sort(key=lambda x: x["totalLeaveDays"], reverse=True)
        return ReportData(rows=out_rows, summary=summary, working_days=working)
