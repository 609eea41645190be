from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .database.connection import DBConfig, DatabaseConnection
from .leaves.memory_leave_repository import InMemoryLeaveRepository
from .leaves.mysql_leave_repository import MySQLLeaveRepository
from .leaves.seed import SEED_LEAVE_RECORDS
from .leaves.service import LeaveService
from .reports.service import LeaveReportService
from .sync.context import SyncConfig, SyncContext
from .sync.orchestrator import LocalSeed, SyncOrchestrator
from .users.mongo_directory_feed import MongoConfig, MongoDirectoryFeed
from .users.mysql_directory_repository import MySQLDirectoryRepository
from .users.profile_service import ProfileService
from .users.seed import SEED_SCHOOLS, SEED_TEACHERS
from .users.service import AuthService


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    sync_context: SyncContext
    orchestrator: SyncOrchestrator

    primary_leaves: Optional[MySQLLeaveRepository]
    local_leaves: InMemoryLeaveRepository
    directory_repo: Optional[MySQLDirectoryRepository]
    directory_feed: Optional[MongoDirectoryFeed]

    auth_service: AuthService
    profile_service: ProfileService
    leave_service: LeaveService
    leave_report_service: LeaveReportService


def build_container(
    *,
    db_config: Optional[dict],
    mongo_uri: str = "",
    mongo_db_name: str = "",
    local_latency_seconds: float = 0.0,
) -> Container:
    primary_config = DBConfig.from_mapping(db_config)
    document_config = MongoConfig(uri=mongo_uri or "", database=mongo_db_name or "")
    context = SyncContext(
        config=SyncConfig(
            primary=primary_config,
            document=document_config,
            local_latency_seconds=float(local_latency_seconds),
        )
    )

    conn = DatabaseConnection(primary_config) if primary_config.is_configured else None
    primary_leaves = MySQLLeaveRepository(conn) if conn else None
    directory_repo = MySQLDirectoryRepository(conn) if conn else None
    directory_feed = MongoDirectoryFeed(document_config) if document_config.is_configured else None
    local_leaves = InMemoryLeaveRepository()

    orchestrator = SyncOrchestrator(
        context,
        local_leaves=local_leaves,
        seed=LocalSeed(teachers=SEED_TEACHERS, schools=SEED_SCHOOLS, leaves=SEED_LEAVE_RECORDS),
        directory=directory_repo,
        feed=directory_feed,
    )

    auth_service = AuthService(context)
    profile_service = ProfileService(orchestrator, context, directory_repo)
    leave_service = LeaveService(orchestrator, local_leaves, primary_leaves)
    leave_report_service = LeaveReportService(leave_service, context)

    return Container(
        conn=conn,
        sync_context=context,
        orchestrator=orchestrator,
        primary_leaves=primary_leaves,
        local_leaves=local_leaves,
        directory_repo=directory_repo,
        directory_feed=directory_feed,
        auth_service=auth_service,
        profile_service=profile_service,
        leave_service=leave_service,
        leave_report_service=leave_report_service,
    )
