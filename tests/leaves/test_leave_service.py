from __future__ import annotations

import itertools
from dataclasses import replace
from datetime import date, datetime, time

import pytest

from src.school_admin.school_admin.core.enums import LeaveStatus, LeaveType, SyncSource, TeacherRole, TierState
from src.school_admin.school_admin.core.exceptions import AuthorizationError, NotFoundError, RecordMissing, ValidationError
from src.school_admin.school_admin.database.connection import DBConfig
from src.school_admin.school_admin.leaves.memory_leave_repository import InMemoryLeaveRepository
from src.school_admin.school_admin.leaves.model import LeaveRecord
from src.school_admin.school_admin.leaves.service import LeaveService
from src.school_admin.school_admin.sync.context import SyncConfig, SyncContext
from src.school_admin.school_admin.sync.orchestrator import LocalSeed, SyncOrchestrator
from src.school_admin.school_admin.users.model import Teacher
from src.school_admin.school_admin.users.mongo_directory_feed import MongoConfig

PRIMARY_ON = DBConfig(host="db", port=3306, user="u", password="p", database="school")
PRIMARY_OFF = DBConfig(host="", port=3306, user="", password="", database="")
NOW = datetime(2024, 6, 3, 9, 15, 42, 123456)
MONDAY = date(2024, 6, 3)

TEACHER = Teacher(id="t1", school_id="s1", name="Ann", position="Teacher", roles=frozenset({TeacherRole.TEACHER}))
OTHER = Teacher(id="t2", school_id="s1", name="Bob", position="Teacher", roles=frozenset({TeacherRole.TEACHER}))
DIRECTOR = Teacher(id="d1", school_id="s1", name="Dee", position="Director", roles=frozenset({TeacherRole.DIRECTOR}))
ADMIN = Teacher(
    id="a1", school_id="s1", name="Ada", position="Teacher", roles=frozenset({TeacherRole.TEACHER, TeacherRole.SYSTEM_ADMIN})
)


class FakePrimary:
    """MySQL-shaped leave repository whose availability can be toggled.

    Like the real UPDATE and DELETE, writes to an unknown id match nothing.
    """

    def __init__(self, records=(), *, down: bool = False):
        self.records: dict[str, LeaveRecord] = {r.id: r for r in records}
        self.down = down

    def _check(self):
        if self.down:
            raise ConnectionError("primary unreachable")

    def list_all(self):
        self._check()
        return sorted(self.records.values(), key=lambda r: r.created_at, reverse=True)

    def get(self, *, request_id):
        self._check()
        return self.records.get(request_id)

    def create(self, record):
        self._check()
        self.records[record.id] = record
        return record

    def update_status(self, *, record, status, approved_date, director_signature):
        self._check()
        if record.id not in self.records:
            raise RecordMissing(SyncSource.SQL, record.id)
        updated = replace(record, status=status, approved_date=approved_date, director_signature=director_signature)
        self.records[record.id] = updated
        return updated

    def delete(self, *, request_id):
        self._check()
        if self.records.pop(request_id, None) is None:
            raise RecordMissing(SyncSource.SQL, request_id)
        return True


def _record(rid: str, *, teacher: Teacher = TEACHER, status=LeaveStatus.PENDING, school_id="s1", **kw) -> LeaveRecord:
    return LeaveRecord(
        id=rid,
        school_id=school_id,
        teacher_id=teacher.id,
        teacher_name=teacher.name,
        type=kw.pop("leave_type", LeaveType.SICK),
        start_date=MONDAY,
        end_date=kw.pop("end_date", MONDAY),
        reason="flu",
        status=status,
        created_at=kw.pop("created_at", datetime(2024, 6, 1, 8, 0)),
        **kw,
    )


def _service(*, primary=None, local_records=()):
    config = SyncConfig(primary=PRIMARY_ON if primary else PRIMARY_OFF, document=MongoConfig(uri="", database=""))
    context = SyncContext(config=config)
    local = InMemoryLeaveRepository(local_records)
    orchestrator = SyncOrchestrator(context, local_leaves=local, seed=LocalSeed(teachers=(), schools=()))
    ids = (f"leave_{n}" for n in itertools.count(1))
    service = LeaveService(orchestrator, local, primary, clock=lambda: NOW, id_factory=lambda: next(ids))
    return service, local, context


def _submit(service, teacher=TEACHER, **overrides):
    params = dict(
        teacher=teacher,
        leave_type="Sick",
        start_date=MONDAY,
        end_date=MONDAY,
        reason="flu",
    )
    params.update(overrides)
    return service.submit_request(**params)


def test_submit_without_primary_saves_offline():
    service, local, _ = _service()

    result = _submit(service, end_date=date(2024, 6, 4), contact_info="  home  ")

    assert result.outcome.source == SyncSource.LOCAL
    assert result.outcome.message == "Saved offline"
    assert result.off_campus_count is None
    record = result.record
    assert record.id == "leave_1"
    assert record.status == LeaveStatus.PENDING
    assert record.teacher_signature == "Ann"
    assert record.school_id == "s1"
    assert record.contact_info == "home"
    assert record.created_at == datetime(2024, 6, 3, 9, 15, 42)
    assert local.get(request_id="leave_1") == record


def test_submit_with_healthy_primary_stays_remote():
    primary = FakePrimary()
    service, local, _ = _service(primary=primary)

    result = _submit(service)

    assert result.outcome.source == SyncSource.SQL
    assert result.outcome.message == "Saved to database"
    assert "leave_1" in primary.records
    assert local.list_all() == []


def test_submit_falls_back_when_primary_write_fails():
    primary = FakePrimary(down=True)
    service, local, context = _service(primary=primary)

    result = _submit(service)

    assert result.outcome.source == SyncSource.LOCAL
    assert result.outcome.message == "Saved offline"
    assert primary.records == {}
    assert [r.id for r in service.list_records()] == ["leave_1"]


def test_offline_writes_stay_visible_after_primary_recovers():
    remote = _record("remote_1", created_at=datetime(2024, 5, 1, 8, 0))
    primary = FakePrimary([remote], down=True)
    service, _, _ = _service(primary=primary)
    _submit(service)

    primary.down = False

    assert [r.id for r in service.list_records()] == ["leave_1", "remote_1"]


@pytest.mark.parametrize(
    "overrides,message",
    [
        ({"end_date": date(2024, 6, 2)}, "End date must be on or after start date"),
        ({"reason": "   "}, "Reason is required"),
        ({"leave_type": "Vacation"}, "Unknown leave type"),
        ({"leave_type": "Late"}, "Start time is required"),
        ({"leave_type": "Late", "start_time": "8.30"}, "Invalid time"),
    ],
)
def test_submit_rejects_invalid_input(overrides, message):
    service, local, _ = _service()

    with pytest.raises(ValidationError) as exc:
        _submit(service, **overrides)

    assert message in str(exc.value)
    assert local.list_all() == []


def test_timed_leave_keeps_times_only_where_they_apply():
    service, _, _ = _service()

    late = _submit(service, leave_type="Late", start_time="08:45", end_time="10:00").record
    off = _submit(service, leave_type="OffCampus", start_time="13:00", end_time="15:30").record
    sick = _submit(service, start_time="08:00").record

    assert (late.start_time, late.end_time) == (time(8, 45), None)
    assert (off.start_time, off.end_time) == (time(13, 0), time(15, 30))
    assert (sick.start_time, sick.end_time) == (None, None)


def test_off_campus_submission_reports_prior_count():
    service, _, _ = _service()

    first = _submit(service, leave_type="OffCampus", start_time="13:00")
    second = _submit(service, leave_type="OffCampus", start_time="13:00")
    _submit(service, teacher=OTHER, leave_type="OffCampus", start_time="13:00")

    assert first.off_campus_count == 0
    assert second.off_campus_count == 1
    assert service.off_campus_count(TEACHER.id) == 2


def test_only_directors_can_decide():
    service, _, _ = _service(local_records=[_record("r1")])

    with pytest.raises(AuthorizationError):
        service.approve(director=ADMIN, request_id="r1")


def test_approve_signs_and_dates_the_request():
    service, local, _ = _service(local_records=[_record("r1")])

    outcome = service.approve(director=DIRECTOR, request_id="r1")

    assert outcome.source == SyncSource.LOCAL
    record = outcome.value
    assert record.status == LeaveStatus.APPROVED
    assert record.director_signature == "Dee"
    assert record.approved_date == NOW.date()
    assert local.get(request_id="r1") == record


def test_reject_leaves_signature_empty():
    service, _, _ = _service(local_records=[_record("r1")])

    record = service.reject(director=DIRECTOR, request_id="r1").value

    assert record.status == LeaveStatus.REJECTED
    assert record.director_signature is None


def test_decided_request_cannot_be_decided_again():
    service, _, _ = _service(local_records=[_record("r1")])
    service.approve(director=DIRECTOR, request_id="r1")

    with pytest.raises(ValidationError):
        service.reject(director=DIRECTOR, request_id="r1")


def test_decide_unknown_request_raises_not_found():
    service, _, _ = _service()

    with pytest.raises(NotFoundError):
        service.approve(director=DIRECTOR, request_id="missing")


def test_decision_on_offline_only_record_reports_offline_save():
    primary = FakePrimary(down=True)
    service, local, context = _service(primary=primary)
    _submit(service)
    primary.down = False

    outcome = service.approve(director=DIRECTOR, request_id="leave_1")

    assert outcome.source == SyncSource.LOCAL
    assert outcome.message == "Saved offline"
    assert outcome.persisted_remotely is False
    assert "leave_1" not in primary.records
    assert local.get(request_id="leave_1").status == LeaveStatus.APPROVED
    assert service.get_record("leave_1").status == LeaveStatus.APPROVED
    # A missing row is not a backend failure.
    assert context.tier_states[SyncSource.SQL] == TierState.CONNECTED


def test_remote_decision_updates_offline_copy():
    shared = _record("r1")
    primary = FakePrimary([shared])
    service, local, _ = _service(primary=primary, local_records=[shared])

    outcome = service.approve(director=DIRECTOR, request_id="r1")

    assert outcome.source == SyncSource.SQL
    assert primary.records["r1"].status == LeaveStatus.APPROVED
    assert local.get(request_id="r1").status == LeaveStatus.APPROVED


def test_list_visible_scopes_by_role_and_school():
    records = [
        _record("mine"),
        _record("mine_done", status=LeaveStatus.APPROVED),
        _record("theirs", teacher=OTHER),
        _record("elsewhere", teacher=OTHER, school_id="s2"),
    ]
    service, _, _ = _service(local_records=records)

    own = service.list_visible(TEACHER)
    everyone = service.list_visible(DIRECTOR)

    assert [r.id for r in own["pending"]] == ["mine"]
    assert [r.id for r in own["history"]] == ["mine_done"]
    assert {r.id for r in everyone["pending"]} == {"mine", "theirs"}
    assert [r.id for r in everyone["history"]] == ["mine_done"]


def test_teacher_stats_counts_approved_requests_only():
    records = [
        _record("a", status=LeaveStatus.APPROVED, end_date=date(2024, 6, 5)),
        _record("b"),
    ]
    service, _, _ = _service(local_records=records)

    stats = service.teacher_stats(TEACHER.id)

    assert stats.sick == 1
    assert stats.total_leave_days == 3


def test_form_summary_for_unknown_request_raises():
    service, _, _ = _service()

    with pytest.raises(NotFoundError):
        service.form_summary("missing")


def test_plain_teachers_cannot_delete():
    service, _, _ = _service(local_records=[_record("r1")])

    with pytest.raises(AuthorizationError):
        service.delete_request(actor=TEACHER, request_id="r1")


def test_admin_deletes_offline_record():
    service, local, _ = _service(local_records=[_record("r1")])

    outcome = service.delete_request(actor=ADMIN, request_id="r1")

    assert outcome.source == SyncSource.LOCAL
    assert outcome.value is True
    assert local.list_all() == []


def test_offline_delete_hides_remote_copy_after_recovery():
    shared = _record("r1")
    primary = FakePrimary([shared], down=True)
    service, _, _ = _service(primary=primary, local_records=[shared])

    service.delete_request(actor=DIRECTOR, request_id="r1")
    primary.down = False

    assert "r1" in primary.records
    assert service.list_records() == []


def test_remote_delete_also_drops_offline_copy():
    shared = _record("r1")
    primary = FakePrimary([shared])
    service, local, _ = _service(primary=primary, local_records=[shared])

    outcome = service.delete_request(actor=DIRECTOR, request_id="r1")

    assert outcome.source == SyncSource.SQL
    assert outcome.value is True
    assert primary.records == {}
    assert local.get(request_id="r1") is None


def test_delete_of_offline_only_record_stays_local():
    primary = FakePrimary(down=True)
    service, local, _ = _service(primary=primary)
    _submit(service)
    primary.down = False

    outcome = service.delete_request(actor=DIRECTOR, request_id="leave_1")

    assert outcome.source == SyncSource.LOCAL
    assert outcome.message == "Saved offline"
    assert local.list_all() == []
    assert service.list_records() == []


def test_numeric_time_from_json_is_a_validation_error():
    service, _, _ = _service()

    with pytest.raises(ValidationError, match="HH:MM"):
        _submit(service, leave_type="Late", start_time=830)
