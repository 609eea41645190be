from __future__ import annotations

import logging
import time
from collections import Counter
from dataclasses import dataclass
from typing import Any, Callable, Generic, Iterable, Mapping, Optional, TypeVar

from ..core.constants import SAVED_OFFLINE_MESSAGE, SAVED_REMOTE_MESSAGE
from ..core.enums import SyncOperation, SyncSource, TierState
from ..core.exceptions import BackendUnavailable, ConfigurationAbsent, RecordMissing, SyncError
from ..leaves.memory_leave_repository import InMemoryLeaveRepository
from ..leaves.model import LeaveRecord
from ..users.model import School, Teacher
from ..users.repository import DirectoryFeed, DirectoryRepository, Subscription
from .context import SyncContext
from .policy import chain_for

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class AttemptResult(Generic[T]):
    source: SyncSource
    ok: bool
    value: Optional[T] = None
    error: Optional[SyncError] = None


@dataclass(frozen=True)
class WriteOutcome(Generic[T]):
    source: SyncSource
    value: T

    @property
    def persisted_remotely(self) -> bool:
        return self.source != SyncSource.LOCAL

    @property
    def message(self) -> str:
        return SAVED_REMOTE_MESSAGE if self.persisted_remotely else SAVED_OFFLINE_MESSAGE


@dataclass(frozen=True)
class LocalSeed:
    teachers: tuple[Teacher, ...]
    schools: tuple[School, ...]
    leaves: tuple[LeaveRecord, ...] = ()


class SyncOrchestrator:
    """Chooses the authoritative backend at startup and routes every write.

    Each tier is tried through ``attempt``; the order comes from the policy
    table. Any exception from a configured tier moves on to the next one.
    """

    def __init__(
        self,
        context: SyncContext,
        *,
        local_leaves: InMemoryLeaveRepository,
        seed: LocalSeed,
        directory: Optional[DirectoryRepository] = None,
        feed: Optional[DirectoryFeed] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self._context = context
        self._local_leaves = local_leaves
        self._seed = seed
        self._directory = directory
        self._feed = feed
        self._sleep = sleep
        self._subscriptions: list[Subscription] = []
        self._failures: Counter = Counter()

    @property
    def context(self) -> SyncContext:
        return self._context

    # -------- Tier attempts --------
    def attempt(self, source: SyncSource, call: Optional[Callable[[], T]]) -> AttemptResult[T]:
        if call is None or not self._context.config.is_configured(source):
            self._context.mark(source, TierState.UNCONFIGURED)
            return AttemptResult(source=source, ok=False, error=ConfigurationAbsent(source.value))
        failures_before = self._failures[source]
        try:
            value = call()
        except RecordMissing as exc:
            logger.info("%s", exc)
            self._context.mark(source, TierState.CONNECTED)
            return AttemptResult(source=source, ok=False, error=exc)
        except Exception as exc:
            logger.warning("%s tier failed, falling back: %s", source.value, exc)
            self._degrade(source)
            return AttemptResult(source=source, ok=False, error=BackendUnavailable(source, exc))
        # A callback may have reported a failure while the call ran.
        if self._failures[source] == failures_before:
            self._context.mark(source, TierState.CONNECTED)
        return AttemptResult(source=source, ok=True, value=value)

    def _degrade(self, source: SyncSource) -> None:
        self._failures[source] += 1
        self._context.mark(source, TierState.DEGRADED)

    def _run_chain(self, operation: SyncOperation, calls: Mapping[SyncSource, Callable[[], Any]]) -> AttemptResult:
        result: Optional[AttemptResult] = None
        for source in chain_for(operation):
            result = self.attempt(source, calls.get(source))
            if result.ok:
                return result
        # LOCAL terminates every chain; reaching here means the local call itself raised.
        if result is None or result.error is None:
            raise SyncError(f"no tier accepted {operation.value}")
        raise result.error

    # -------- Startup --------
    def start(self) -> SyncSource:
        self._run_chain(
            SyncOperation.STARTUP,
            {
                SyncSource.SQL: self._read_primary_directory if self._directory else None,
                SyncSource.DOCUMENT: self._subscribe_document_directory if self._feed else None,
                SyncSource.LOCAL: self._load_local,
            },
        )
        logger.info("startup complete: active source=%s", self._context.active_source)
        return self._context.active_source

    def _adopt(self, source: SyncSource) -> None:
        if self._context.active_source != source:
            logger.info("adopting %s as active source", source.value)
        self._context.active_source = source

    def _read_primary_directory(self) -> None:
        teachers = list(self._directory.list_teachers())
        schools = list(self._directory.list_schools())
        self._context.teachers = teachers
        self._context.schools = schools
        self._adopt(SyncSource.SQL)
        self._context.data_loaded = True

    def _subscribe_document_directory(self) -> None:
        self._subscriptions.append(self._feed.subscribe_schools(self._on_schools, self._on_schools_error))
        self._subscriptions.append(self._feed.subscribe_teachers(self._on_teachers, self._on_teachers_error))

    def _load_local(self) -> None:
        if self._context.config.local_latency_seconds > 0:
            self._sleep(self._context.config.local_latency_seconds)
        self._use_seed_directory()
        self._adopt(SyncSource.LOCAL)
        self._context.data_loaded = True

    def _use_seed_directory(self) -> None:
        self._context.teachers = list(self._seed.teachers)
        self._context.schools = list(self._seed.schools)
        self._local_leaves.load(self._seed.leaves)

    # -------- Live directory callbacks --------
    def _on_teachers(self, teachers: Iterable[Teacher]) -> None:
        # An empty collection (first run) keeps the app usable with seed data.
        self._context.teachers = list(teachers) or list(self._seed.teachers)
        self._adopt(SyncSource.DOCUMENT)
        self._context.data_loaded = True

    def _on_schools(self, schools: Iterable[School]) -> None:
        self._context.schools = list(schools) or list(self._seed.schools)
        # Once a teacher-stream failure has fallen back to seed data, stay there.
        if self._context.active_source != SyncSource.LOCAL:
            self._adopt(SyncSource.DOCUMENT)

    def _on_teachers_error(self, exc: Exception) -> None:
        logger.error("teacher stream error: %s", exc)
        self._degrade(SyncSource.DOCUMENT)
        if self._context.data_loaded:
            return
        self._use_seed_directory()
        self._adopt(SyncSource.LOCAL)
        self._context.data_loaded = True

    def _on_schools_error(self, exc: Exception) -> None:
        logger.error("school stream error: %s", exc)
        self._degrade(SyncSource.DOCUMENT)
        if not self._context.schools:
            self._context.schools = list(self._seed.schools)

    # -------- Writes & reads --------
    def write(self, *, primary: Optional[Callable[[], T]], local: Callable[[], T]) -> WriteOutcome[T]:
        """Run a logical write against the primary, else the local store.

        Never raises for backend failures: the local store is the terminus.
        """
        result = self._run_chain(SyncOperation.WRITE, {SyncSource.SQL: primary, SyncSource.LOCAL: local})
        return WriteOutcome(source=result.source, value=result.value)

    def read(self, *, primary: Optional[Callable[[], T]], local: Callable[[], T]) -> AttemptResult[T]:
        return self._run_chain(SyncOperation.READ, {SyncSource.SQL: primary, SyncSource.LOCAL: local})

    # -------- Teardown --------
    def shutdown(self) -> None:
        for sub in self._subscriptions:
            sub.unsubscribe()
        self._subscriptions.clear()
        close = getattr(self._feed, "close", None)
        if callable(close):
            close()
