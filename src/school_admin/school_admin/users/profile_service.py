from __future__ import annotations

import logging
from dataclasses import replace
from typing import Callable, Optional

from werkzeug.security import generate_password_hash

from ..common.validators import optional_text, require_non_empty
from ..core.constants import (
    ACADEMIC_POSITIONS,
    CITIZEN_ID_LENGTH,
    DEFAULT_PASSWORD,
    DEFAULT_POSITION,
    DIRECTOR_POSITION_KEYWORD,
    MIN_PASSWORD_LENGTH,
    SCHOOL_ID_LENGTH,
)
from ..core.enums import TeacherRole
from ..core.exceptions import NotFoundError, ValidationError
from ..sync.context import SyncContext
from ..sync.orchestrator import SyncOrchestrator, WriteOutcome
from .model import Teacher, find_teacher
from .repository import ProfileRepository

logger = logging.getLogger(__name__)


class ProfileService:
    """Use cases: self-registration, first-login setup and profile edits.

    Profile writes follow the leave write path (primary, else the loaded
    directory). Either way the loaded directory is updated so the change is
    visible to login and permission checks straight away.
    """

    def __init__(
        self,
        orchestrator: SyncOrchestrator,
        context: SyncContext,
        primary: Optional[ProfileRepository] = None,
        *,
        hash_password: Callable[[str], str] = generate_password_hash,
    ):
        self._orchestrator = orchestrator
        self._context = context
        self._primary = primary
        self._hash_password = hash_password

    def _persist(self, teacher: Teacher, remote: Callable[[ProfileRepository], Teacher]) -> WriteOutcome[Teacher]:
        def _remote() -> Teacher:
            saved = remote(self._primary)
            return self._context.upsert_teacher(saved)

        return self._orchestrator.write(
            primary=_remote if self._primary else None,
            local=lambda: self._context.upsert_teacher(teacher),
        )

    def _check_password(self, password, confirm=None) -> str:
        password = "" if password is None else str(password)
        if len(password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
        if confirm is not None and password != str(confirm):
            raise ValidationError("Passwords do not match")
        if password == DEFAULT_PASSWORD:
            raise ValidationError("Choose a password other than the default one")
        return password

    @staticmethod
    def _check_position(position, current: str = "") -> str:
        position = require_non_empty(position, "Position")
        if position not in ACADEMIC_POSITIONS and position != current:
            raise ValidationError(f"Unknown position: {position!r}")
        return position

    # -------- Registration --------
    def register(self, *, school_id, teacher_id, name) -> WriteOutcome[Teacher]:
        school_id = optional_text(school_id)
        if len(school_id) != SCHOOL_ID_LENGTH:
            raise ValidationError(f"School id must have {SCHOOL_ID_LENGTH} digits")
        if not any(s.id == school_id for s in self._context.schools):
            raise NotFoundError("School is not registered; ask a system admin to create it")

        teacher_id = optional_text(teacher_id)
        if len(teacher_id) != CITIZEN_ID_LENGTH or not teacher_id.isdigit():
            raise ValidationError(f"Citizen id must have {CITIZEN_ID_LENGTH} digits")
        if find_teacher(self._context.teachers, teacher_id):
            raise ValidationError("This citizen id is already registered")
        name = require_non_empty(name, "Name")

        teacher = Teacher(
            id=teacher_id,
            school_id=school_id,
            name=name,
            position=DEFAULT_POSITION,
            roles=frozenset({TeacherRole.TEACHER}),
            password_hash=self._hash_password(DEFAULT_PASSWORD),
            is_first_login=True,
        )
        outcome = self._persist(teacher, lambda repo: repo.create_teacher(teacher))
        logger.info("teacher %s registered at %s via %s", teacher.id, school_id, outcome.source.value)
        return outcome

    # -------- First login --------
    def complete_first_login(self, *, teacher: Teacher, new_password, confirm_password, position) -> WriteOutcome[Teacher]:
        if not teacher.is_first_login:
            raise ValidationError("First-login setup is already complete")
        password = self._check_password(new_password, confirm_password)
        position = self._check_position(position)

        roles = teacher.roles
        if DIRECTOR_POSITION_KEYWORD in position:
            roles = roles | {TeacherRole.DIRECTOR, TeacherRole.TEACHER}

        updated = replace(
            teacher,
            password_hash=self._hash_password(password),
            position=position,
            roles=frozenset(roles),
            is_first_login=False,
        )
        outcome = self._persist(updated, lambda repo: repo.update_teacher(updated))
        logger.info("teacher %s finished first-login setup via %s", teacher.id, outcome.source.value)
        return outcome

    # -------- Profile --------
    def update_profile(
        self,
        *,
        teacher: Teacher,
        name,
        position,
        password=None,
        signature_base64: Optional[str] = None,
    ) -> WriteOutcome[Teacher]:
        """Save name, position, and optionally a new password or signature.

        A blank password keeps the current one; ``signature_base64=None`` keeps
        the current signature and an empty string clears it.
        """
        changes = {
            "name": require_non_empty(name, "Name"),
            "position": self._check_position(position, current=teacher.position),
        }
        if optional_text(password):
            changes["password_hash"] = self._hash_password(self._check_password(password))
        if signature_base64 is not None:
            changes["signature_base64"] = optional_text(signature_base64) or None

        updated = replace(teacher, **changes)
        outcome = self._persist(updated, lambda repo: repo.update_teacher(updated))
        logger.info("teacher %s updated profile via %s", teacher.id, outcome.source.value)
        return outcome
