"""Fallback order per operation.

Startup walks all three tiers. Writes and leave reads skip the document store,
which only serves the directory read path.
"""
from __future__ import annotations

from ..core.enums import SyncOperation, SyncSource

FALLBACK_POLICY: dict[SyncOperation, tuple[SyncSource, ...]] = {
    SyncOperation.STARTUP: (SyncSource.SQL, SyncSource.DOCUMENT, SyncSource.LOCAL),
    SyncOperation.WRITE: (SyncSource.SQL, SyncSource.LOCAL),
    SyncOperation.READ: (SyncSource.SQL, SyncSource.LOCAL),
}


def chain_for(operation: SyncOperation) -> tuple[SyncSource, ...]:
    return FALLBACK_POLICY[operation]
