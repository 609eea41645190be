from __future__ import annotations

from typing import Callable, Protocol, Sequence

from .model import School, Teacher


class DirectoryRepository(Protocol):
    """One-shot bulk reads of the teacher/school directory."""

    def list_teachers(self) -> Sequence[Teacher]:
        raise NotImplementedError

    def list_schools(self) -> Sequence[School]:
        raise NotImplementedError


class ProfileRepository(Protocol):
    """Primary-tier writes to teacher profiles."""

    def create_teacher(self, teacher: Teacher) -> Teacher:
        raise NotImplementedError

    def update_teacher(self, teacher: Teacher) -> Teacher:
        """Overwrite the stored profile; raises ``RecordMissing`` when absent."""

        raise NotImplementedError


class Subscription(Protocol):
    def unsubscribe(self) -> None:
        raise NotImplementedError


class DirectoryFeed(Protocol):
    """Live directory streams. Each callback receives a full snapshot."""

    def subscribe_teachers(
        self,
        on_snapshot: Callable[[list[Teacher]], None],
        on_error: Callable[[Exception], None],
    ) -> Subscription:
        raise NotImplementedError

    def subscribe_schools(
        self,
        on_snapshot: Callable[[list[School]], None],
        on_error: Callable[[Exception], None],
    ) -> Subscription:
        raise NotImplementedError
