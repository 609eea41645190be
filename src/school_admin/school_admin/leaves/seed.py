"""Demo leave records loaded into the local tier when it is adopted at startup."""
from __future__ import annotations

from datetime import date, datetime, time

from ..core.enums import LeaveStatus, LeaveType
from .model import LeaveRecord

SEED_LEAVE_RECORDS: tuple[LeaveRecord, ...] = (
    LeaveRecord(
        id="seed_leave_1",
        school_id="31030019",
        teacher_id="1111111111111",
        teacher_name="ครูสมชาย ใจดี",
        type=LeaveType.SICK,
        start_date=date(2023, 10, 20),
        end_date=date(2023, 10, 21),
        reason="ไข้หวัดใหญ่",
        status=LeaveStatus.APPROVED,
        created_at=datetime(2023, 10, 19, 8, 0),
        teacher_signature="ครูสมชาย ใจดี",
        director_signature="นายอำนวย การดี",
        approved_date=date(2023, 10, 19),
    ),
    LeaveRecord(
        id="seed_leave_2",
        school_id="31030019",
        teacher_id="t2",
        teacher_name="ครูวิภา รักเรียน",
        type=LeaveType.PERSONAL,
        start_date=date(2023, 10, 26),
        end_date=date(2023, 10, 26),
        reason="ทำธุระที่อำเภอ",
        status=LeaveStatus.PENDING,
        created_at=datetime(2023, 10, 24, 9, 30),
        teacher_signature="ครูวิภา รักเรียน",
    ),
    LeaveRecord(
        id="seed_leave_3",
        school_id="31030019",
        teacher_id="t2",
        teacher_name="ครูวิภา รักเรียน",
        type=LeaveType.LATE,
        start_date=date(2023, 10, 23),
        end_date=date(2023, 10, 23),
        start_time=time(9, 15),
        reason="รถติด",
        status=LeaveStatus.APPROVED,
        created_at=datetime(2023, 10, 23, 9, 20),
        teacher_signature="ครูวิภา รักเรียน",
        director_signature="นายอำนวย การดี",
        approved_date=date(2023, 10, 23),
    ),
)
