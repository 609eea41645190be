from __future__ import annotations

from enum import Enum


class TeacherRole(str, Enum):
    """Roles used for permissions."""

    SYSTEM_ADMIN = "SYSTEM_ADMIN"
    DIRECTOR = "DIRECTOR"
    DOCUMENT_OFFICER = "DOCUMENT_OFFICER"
    FINANCE_BUDGET = "FINANCE_BUDGET"
    FINANCE_NONBUDGET = "FINANCE_NONBUDGET"
    PLAN_OFFICER = "PLAN_OFFICER"
    TEACHER = "TEACHER"


class LeaveType(str, Enum):
    """Leave categories. OffCampus and Late consume hours, not days."""

    SICK = "Sick"
    PERSONAL = "Personal"
    OFF_CAMPUS = "OffCampus"
    LATE = "Late"


class LeaveStatus(str, Enum):
    """Approval flow status. Approved and Rejected are terminal."""

    PENDING = "Pending"
    APPROVED = "Approved"
    REJECTED = "Rejected"


class SyncSource(str, Enum):
    """Which backend is currently authoritative (display only)."""

    SQL = "SQL"
    DOCUMENT = "DOCUMENT"
    LOCAL = "LOCAL"


class TierState(str, Enum):
    UNCONFIGURED = "UNCONFIGURED"
    CONNECTED = "CONNECTED"
    DEGRADED = "DEGRADED"


class SyncOperation(str, Enum):
    STARTUP = "STARTUP"
    WRITE = "WRITE"
    READ = "READ"
