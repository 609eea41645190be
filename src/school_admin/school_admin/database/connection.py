from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional

import mysql.connector
from mysql.connector.constants import ClientFlag


@dataclass(frozen=True)
class DBConfig:
    host: str
    port: int
    user: str
    password: str
    database: str

    @property
    def is_configured(self) -> bool:
        return bool(self.host and self.user and self.database)

    @classmethod
    def from_mapping(cls, db_config: Optional[Mapping[str, Any]]) -> "DBConfig":
        db_config = db_config or {}
        return cls(
            host=str(db_config.get("host") or ""),
            port=int(db_config.get("port") or 3306),
            user=str(db_config.get("user") or ""),
            password=str(db_config.get("password") or ""),
            database=str(db_config.get("database") or ""),
        )


class DatabaseConnection:
    """DB connection factory for the primary relational tier.

    Note: We create short-lived connections per operation (safe for simple Flask apps).
    """

    def __init__(self, config: DBConfig):
        self._config = config

    @property
    def config(self) -> DBConfig:
        return self._config

    def connect(self):
        return mysql.connector.connect(
            host=self._config.host,
            port=int(self._config.port),
            user=self._config.user,
            password=self._config.password,
            database=self._config.database,
            client_flags=[ClientFlag.FOUND_ROWS],
        )
