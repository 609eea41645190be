from __future__ import annotations

from dataclasses import dataclass

from werkzeug.security import check_password_hash

from ..core.enums import TeacherRole
from ..core.exceptions import AuthenticationError, NotFoundError
from ..sync.context import SyncContext
from .model import Teacher, find_teacher


@dataclass(frozen=True)
class SessionTeacher:
    """What we store into Flask session after login."""

    teacher_id: str
    name: str
    school_id: str
    roles: tuple[str, ...]
    is_first_login: bool = False


class AuthService:
    """Use case: authenticate a teacher against the loaded directory."""

    def __init__(self, context: SyncContext):
        self._context = context

    def get_teacher(self, teacher_id: str) -> Teacher:
        teacher = find_teacher(self._context.teachers, str(teacher_id))
        if not teacher:
            raise NotFoundError("Teacher not found")
        return teacher

    def authenticate(self, teacher_id: str, password: str) -> SessionTeacher:
        teacher = find_teacher(self._context.teachers, str(teacher_id or "").strip())
        if not teacher:
            raise AuthenticationError("Invalid teacher id or password")

        try:
            ok = check_password_hash(teacher.password_hash, password or "")
        except Exception:
            # e.g. placeholder hashes or corrupted values
            ok = False

        if not ok:
            raise AuthenticationError("Invalid teacher id or password")

        return SessionTeacher(
            teacher_id=teacher.id,
            name=teacher.name,
            school_id=teacher.school_id,
            roles=tuple(sorted(r.value for r in teacher.roles)),
            is_first_login=teacher.is_first_login,
        )

    def directors_of(self, school_id: str) -> list[Teacher]:
        return [t for t in self._context.teachers if t.school_id == school_id and TeacherRole.DIRECTOR in t.roles]
