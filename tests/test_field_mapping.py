from __future__ import annotations

from datetime import date, datetime, time, timedelta

from src.school_admin.school_admin.common.field_mapping import camel_to_snake, snake_to_camel, to_snake_keys
from src.school_admin.school_admin.core.enums import LeaveStatus, LeaveType
from src.school_admin.school_admin.database.mysql_base import mysql_time
from src.school_admin.school_admin.leaves.model import LeaveRecord


def test_digit_names_use_explicit_mapping():
    assert camel_to_snake("signatureBase64") == "signature_base_64"
    assert snake_to_camel("signature_base_64") == "signatureBase64"


def test_plain_names_convert_both_ways():
    assert camel_to_snake("teacherId") == "teacher_id"
    assert camel_to_snake("approvedDate") == "approved_date"
    assert snake_to_camel("start_time") == "startTime"
    assert to_snake_keys({"teacherName": "A", "id": "1"}) == {"teacher_name": "A", "id": "1"}


def test_leave_document_uses_camel_case_and_drops_empty_fields():
    record = LeaveRecord(
        id="x1",
        teacher_id="t1",
        teacher_name="A",
        type=LeaveType.LATE,
        start_date=date(2024, 6, 3),
        end_date=date(2024, 6, 3),
        start_time=time(9, 15),
        reason="traffic",
        status=LeaveStatus.PENDING,
        created_at=datetime(2024, 6, 3, 9, 20, 5),
    )

    doc = record.to_document()

    assert doc["teacherId"] == "t1"
    assert doc["type"] == "Late"
    assert doc["startDate"] == "2024-06-03"
    assert doc["startTime"] == "09:15"
    assert doc["createdAt"] == "2024-06-03T09:20:05"
    assert "endTime" not in doc
    assert "approvedDate" not in doc
    assert LeaveRecord.from_document(doc) == record


def test_mysql_time_from_timedelta():
    assert mysql_time(timedelta(hours=8, minutes=30)) == time(8, 30)
    assert mysql_time("17:05:00") == time(17, 5)
    assert mysql_time(None) is None
    assert mysql_time(time(7, 45)) == time(7, 45)
