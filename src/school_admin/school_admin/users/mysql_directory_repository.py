from __future__ import annotations

import json
from typing import Any, Sequence

from ..core.enums import SyncSource
from ..core.exceptions import RecordMissing
from ..database.connection import DatabaseConnection
from ..database.mysql_base import execute, query_all
from .model import School, Teacher
from .repository import DirectoryRepository, ProfileRepository


def _profile_params(t: Teacher) -> tuple[Any, ...]:
    return (
        t.school_id or None,
        t.name,
        t.position,
        json.dumps(sorted(r.value for r in t.roles)),
        t.password_hash,
        int(t.is_first_login),
        t.signature_base64,
    )


class MySQLDirectoryRepository(DirectoryRepository, ProfileRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_teachers(self) -> Sequence[Teacher]:
        rows = query_all(
            self._conn_factory,
            """
            SELECT id, school_id, name, position, roles, password_hash,
                   is_first_login, signature_base_64
            FROM profiles
            ORDER BY name
            """,
        )
        return [Teacher.from_row(r) for r in rows]

    def list_schools(self) -> Sequence[School]:
        rows = query_all(self._conn_factory, "SELECT id, name, district, province FROM schools ORDER BY id")
        return [School.from_row(r) for r in rows]

    def create_teacher(self, teacher: Teacher) -> Teacher:
        execute(
            self._conn_factory,
            """
            INSERT INTO profiles (school_id, name, position, roles, password_hash,
                                  is_first_login, signature_base_64, id)
            VALUES (%s, %s, %s, %s, %s, %s, %s, %s)
            """,
            _profile_params(teacher) + (teacher.id,),
        )
        return teacher

    def update_teacher(self, teacher: Teacher) -> Teacher:
        matched = execute(
            self._conn_factory,
            """
            UPDATE profiles
            SET school_id=%s, name=%s, position=%s, roles=%s, password_hash=%s,
                is_first_login=%s, signature_base_64=%s
            WHERE id=%s
            """,
            _profile_params(teacher) + (teacher.id,),
        )
        if matched == 0:
            raise RecordMissing(SyncSource.SQL, teacher.id)
        return teacher
