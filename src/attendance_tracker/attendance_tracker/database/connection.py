from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import mysql.connector
from mysql.connector import pooling

from ..core.exceptions import StoreError
from ..core.logging import get_logger

logger = get_logger(__name__)


@dataclass
class DBConfig:
    host: str
    port: int
    user: str
    password: str
    database: str
    pool_size: int = 5

    @classmethod
    def from_dict(cls, db_config: dict, *, pool_size: int = 5) -> "DBConfig":
        return cls(
            host=str(db_config.get("host", "localhost")),
            port=int(db_config.get("port", 3306)),
            user=str(db_config.get("user", "root")),
            password=str(db_config.get("password", "")),
            database=str(db_config.get("database", "attendance_tracker")),
            pool_size=int(pool_size),
        )

    def connect_kwargs(self, *, with_database: bool = True) -> dict:
        kwargs = {
            "host": self.host,
            "port": int(self.port),
            "user": self.user,
            "password": self.password,
        }
        if with_database:
            kwargs["database"] = self.database
        return kwargs

    def describe(self) -> str:
        return f"{self.user}@{self.host}:{self.port}/{self.database}"


class DatabaseConnection:
    """Connection pool handle shared by all repositories.

    Built once by the container and closed when the process stops. The pool
    itself is created lazily on the first ``connect()`` call.
    """

    def __init__(self, config: DBConfig, *, pool_name: str = "attendance_tracker"):
        self._config = config
        self._pool_name = pool_name
        self._pool: Optional[pooling.MySQLConnectionPool] = None
        self._closed = False

    @property
    def config(self) -> DBConfig:
        return self._config

    def _get_pool(self) -> pooling.MySQLConnectionPool:
        if self._closed:
            raise StoreError("Database connection pool is closed")
        if self._pool is None:
            try:
                self._pool = pooling.MySQLConnectionPool(
                    pool_name=self._pool_name,
                    pool_size=self._config.pool_size,
                    pool_reset_session=True,
                    **self._config.connect_kwargs(),
                )
            except mysql.connector.Error as e:
                raise StoreError(f"Cannot connect to database {self._config.describe()}: {e}") from e
            logger.info("Connection pool ready (%s, size=%s)", self._config.describe(), self._config.pool_size)
        return self._pool

    def connect(self):
        pool = self._get_pool()
        try:
            return pool.get_connection()
        except mysql.connector.Error as e:
            raise StoreError(f"Cannot get database connection: {e}") from e

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        if self._pool is not None:
            # Closes idle pooled connections; checked-out ones close on release.
            remove_connections = getattr(self._pool, "_remove_connections", None)
            if remove_connections is not None:
                remove_connections()
            self._pool = None
        logger.info("Connection pool closed")
