from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Optional

from ..common.field_mapping import to_snake_keys
from ..core.enums import TeacherRole

VIEW_ALL_ROLES = frozenset({TeacherRole.DIRECTOR, TeacherRole.SYSTEM_ADMIN, TeacherRole.DOCUMENT_OFFICER})


def _parse_roles(value: Any) -> frozenset[TeacherRole]:
    if value is None:
        return frozenset({TeacherRole.TEACHER})
    if isinstance(value, str):
        value = json.loads(value) if value.strip().startswith("[") else value.split(",")
    return frozenset(TeacherRole(str(v).strip()) for v in value if str(v).strip())


@dataclass(frozen=True)
class School:
    id: str
    name: str
    district: Optional[str] = None
    province: Optional[str] = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "School":
        return cls(
            id=str(row["id"]),
            name=str(row["name"]),
            district=row.get("district"),
            province=row.get("province"),
        )

    @classmethod
    def from_document(cls, doc: Mapping[str, Any]) -> "School":
        return cls.from_row(to_snake_keys(doc))


@dataclass(frozen=True)
class Teacher:
    """Domain entity: a staff member of a school.

    Read-only for leave accounting; roles drive permissions.
    """

    id: str
    school_id: str
    name: str
    position: str
    roles: frozenset[TeacherRole]
    password_hash: str = ""
    is_first_login: bool = False
    signature_base64: Optional[str] = None

    def has_role(self, *roles: TeacherRole) -> bool:
        return any(r in self.roles for r in roles)

    @property
    def is_director(self) -> bool:
        return TeacherRole.DIRECTOR in self.roles

    @property
    def can_view_all(self) -> bool:
        return bool(self.roles & VIEW_ALL_ROLES)

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "Teacher":
        return cls(
            id=str(row["id"]),
            school_id=str(row.get("school_id") or ""),
            name=str(row["name"]),
            position=str(row.get("position") or ""),
            roles=_parse_roles(row.get("roles")),
            password_hash=str(row.get("password_hash") or ""),
            is_first_login=bool(row.get("is_first_login") or False),
            signature_base64=row.get("signature_base_64"),
        )

    @classmethod
    def from_document(cls, doc: Mapping[str, Any]) -> "Teacher":
        return cls.from_row(to_snake_keys(doc))

    def to_public_dict(self) -> dict:
        return {
            "id": self.id,
            "schoolId": self.school_id,
            "name": self.name,
            "position": self.position,
            "roles": sorted(r.value for r in self.roles),
            "isFirstLogin": self.is_first_login,
            "hasSignature": bool(self.signature_base64),
        }


def find_teacher(teachers: Iterable[Teacher], teacher_id: str) -> Optional[Teacher]:
    for t in teachers:
        if t.id == teacher_id:
            return t
    return None
