"""Fixed demo directory used by the local tier and by ``seed_db``."""
from __future__ import annotations

from werkzeug.security import generate_password_hash

from ..core.enums import TeacherRole
from .model import School, Teacher

SEED_SCHOOLS: tuple[School, ...] = (
    School(id="31030019", name="โรงเรียนบ้านโคกหลวงพ่อ", district="เมือง", province="กรุงเทพฯ"),
    School(id="10000001", name="โรงเรียนตัวอย่างวิทยา", district="เมือง", province="เชียงใหม่"),
)

SEED_TEACHERS: tuple[Teacher, ...] = (
    Teacher(
        id="1111111111111",
        school_id="31030019",
        name="ครูสมชาย ใจดี",
        position="ครูชำนาญการ",
        roles=frozenset({TeacherRole.TEACHER, TeacherRole.SYSTEM_ADMIN}),
        password_hash=generate_password_hash("password"),
    ),
    Teacher(
        id="dir_001",
        school_id="31030019",
        name="นายอำนวย การดี",
        position="ผู้อำนวยการโรงเรียน",
        roles=frozenset({TeacherRole.DIRECTOR}),
        password_hash=generate_password_hash("password"),
    ),
    Teacher(
        id="t2",
        school_id="31030019",
        name="ครูวิภา รักเรียน",
        position="ครู",
        roles=frozenset({TeacherRole.TEACHER}),
        password_hash=generate_password_hash("123456"),
    ),
)
