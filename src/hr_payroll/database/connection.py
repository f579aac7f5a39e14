from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

import mysql.connector
from mysql.connector import pooling

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DBConfig:
    host: str
    port: int
    user: str
    password: str
    database: str
    pool_size: int = 5

    @classmethod
    def from_dict(cls, db_config: dict) -> "DBConfig":
        return cls(
            host=str(db_config.get("host", "localhost")),
            port=int(db_config.get("port", 3306)),
            user=str(db_config.get("user", "root")),
            password=str(db_config.get("password", "")),
            database=str(db_config.get("database", "hr_payroll")),
            pool_size=int(db_config.get("pool_size", 5)),
        )

    def connect_kwargs(self, *, with_database: bool = True) -> Dict[str, Any]:
        kwargs: Dict[str, Any] = dict(host=self.host, port=self.port, user=self.user, password=self.password)
        if with_database:
            kwargs["database"] = self.database
        return kwargs


class DatabaseConnection:
    """Singleton-like DB connection factory.

    Connections come from a mysql-connector pool when `pool_size` > 0;
    closing a pooled connection hands it back to the pool.
    """

    _instance: Optional["DatabaseConnection"] = None

    def __init__(self, config: DBConfig):
        self._config = config
        self._pool: Optional[pooling.MySQLConnectionPool] = None

    @classmethod
    def get_instance(cls, config: DBConfig) -> "DatabaseConnection":
        if cls._instance is None:
            cls._instance = DatabaseConnection(config)
        return cls._instance

    def _get_pool(self) -> pooling.MySQLConnectionPool:
        if self._pool is None:
            self._pool = pooling.MySQLConnectionPool(
                pool_name="hr_payroll",
                pool_size=self._config.pool_size,
                pool_reset_session=True,
                **self._config.connect_kwargs(),
            )
            logger.info("MySQL pool ready (%s connections to %s)", self._config.pool_size, self._config.database)
        return self._pool

    def connect(self):
        if self._config.pool_size > 0:
            return self._get_pool().get_connection()
        return mysql.connector.connect(**self._config.connect_kwargs())
