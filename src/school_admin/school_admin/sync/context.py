from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from ..core.enums import SyncSource, TierState
from ..database.connection import DBConfig
from ..users.model import School, Teacher
from ..users.mongo_directory_feed import MongoConfig


@dataclass(frozen=True)
class SyncConfig:
    primary: DBConfig
    document: MongoConfig
    local_latency_seconds: float = 0.0

    def is_configured(self, source: SyncSource) -> bool:
        if source == SyncSource.SQL:
            return self.primary.is_configured
        if source == SyncSource.DOCUMENT:
            return self.document.is_configured
        return True


@dataclass
class SyncContext:
    """Process-wide sync state, built once at startup and passed explicitly
    to the orchestrator and the services that read the directory."""

    config: SyncConfig
    active_source: Optional[SyncSource] = None
    data_loaded: bool = False
    teachers: list[Teacher] = field(default_factory=list)
    schools: list[School] = field(default_factory=list)
    tier_states: dict[SyncSource, TierState] = field(default_factory=dict)

    def __post_init__(self) -> None:
        for source in SyncSource:
            if source not in self.tier_states:
                configured = self.config.is_configured(source)
                self.tier_states[source] = TierState.CONNECTED if configured else TierState.UNCONFIGURED

    def mark(self, source: SyncSource, state: TierState) -> None:
        self.tier_states[source] = state

    def upsert_teacher(self, teacher: Teacher) -> Teacher:
        """Replace the loaded directory entry with the same id, or append."""
        for i, existing in enumerate(self.teachers):
            if existing.id == teacher.id:
                self.teachers[i] = teacher
                return teacher
        self.teachers.append(teacher)
        return teacher

    def as_dict(self) -> dict:
        return {
            "activeSource": self.active_source.value if self.active_source else None,
            "dataLoaded": self.data_loaded,
            "tiers": {s.value: st.value for s, st in self.tier_states.items()},
            "teachers": len(self.teachers),
            "schools": len(self.schools),
        }
