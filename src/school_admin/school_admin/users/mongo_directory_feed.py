from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Any, Callable, Optional

from pymongo import MongoClient
from pymongo.collection import Collection
from pymongo.errors import PyMongoError

from ..core.constants import SCHOOLS_COLLECTION, TEACHERS_COLLECTION
from .model import School, Teacher
from .repository import DirectoryFeed

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MongoConfig:
    uri: str
    database: str

    @property
    def is_configured(self) -> bool:
        return bool(self.uri and self.database)


class CollectionSubscription:
    """Initial snapshot on the caller's thread, then a change-stream watcher
    thread that re-emits the full collection on every change."""

    def __init__(
        self,
        collection: Collection,
        on_snapshot: Callable[[list[dict[str, Any]]], None],
        on_error: Callable[[Exception], None],
        *,
        poll_seconds: float = 1.0,
    ):
        self._collection = collection
        self._on_snapshot = on_snapshot
        self._on_error = on_error
        self._poll_seconds = poll_seconds
        self._stop = threading.Event()
        self._stream = None
        self._thread: Optional[threading.Thread] = None

    def start(self) -> "CollectionSubscription":
        try:
            self._emit()
        except (PyMongoError, KeyError, ValueError) as exc:
            self._on_error(exc)
            return self
        self._thread = threading.Thread(
            target=self._watch,
            name=f"watch-{self._collection.name}",
            daemon=True,
        )
        self._thread.start()
        return self

    def _emit(self) -> None:
        docs = list(self._collection.find({}, {"_id": 0}))
        self._on_snapshot(docs)

    def _watch(self) -> None:
        try:
            with self._collection.watch() as stream:
                self._stream = stream
                while not self._stop.is_set():
                    change = stream.try_next()
                    if change is None:
                        self._stop.wait(self._poll_seconds)
                        continue
                    self._emit()
        except (PyMongoError, KeyError, ValueError) as exc:
            if not self._stop.is_set():
                self._on_error(exc)

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def unsubscribe(self) -> None:
        self._stop.set()
        if self._stream is not None:
            self._stream.close()
        # try_next may block for the server's await time.
        if self._thread is not None and self._thread is not threading.current_thread():
            self._thread.join(timeout=self._poll_seconds + 5.0)


class MongoDirectoryFeed(DirectoryFeed):
    def __init__(self, config: MongoConfig, *, client: Optional[MongoClient] = None):
        self._config = config
        self._client = client

    def _get_client(self) -> MongoClient:
        if self._client is None:
            self._client = MongoClient(self._config.uri)
        return self._client

    def _collection(self, name: str) -> Collection:
        return self._get_client()[self._config.database][name]

    def subscribe_teachers(self, on_snapshot, on_error) -> CollectionSubscription:
        def _docs(docs: list[dict[str, Any]]) -> None:
            on_snapshot([Teacher.from_document(d) for d in docs])

        logger.info("subscribing to %s", TEACHERS_COLLECTION)
        return CollectionSubscription(self._collection(TEACHERS_COLLECTION), _docs, on_error).start()

    def subscribe_schools(self, on_snapshot, on_error) -> CollectionSubscription:
        def _docs(docs: list[dict[str, Any]]) -> None:
            on_snapshot([School.from_document(d) for d in docs])

        logger.info("subscribing to %s", SCHOOLS_COLLECTION)
        return CollectionSubscription(self._collection(SCHOOLS_COLLECTION), _docs, on_error).start()

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None
