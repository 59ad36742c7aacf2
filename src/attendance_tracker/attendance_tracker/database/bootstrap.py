from __future__ import annotations

from typing import Iterable, Sequence

import mysql.connector

from ..core.exceptions import StoreError
from ..core.logging import get_logger
from .connection import DBConfig
from .migrations import MIGRATIONS, MIGRATIONS_TABLE_SQL, Migration

logger = get_logger(__name__)


def iter_sql_statements(sql: str) -> Iterable[str]:
    # Minimal SQL splitter for migration bodies (handles ';' inside quotes).
    buf: list[str] = []
    in_single = False
    in_double = False
    escape = False

    for ch in sql:
        if escape:
            buf.append(ch)
            escape = False
            continue

        if ch == "\\":
            buf.append(ch)
            escape = True
            continue

        if ch == "'" and not in_double:
            in_single = not in_single
            buf.append(ch)
            continue

        if ch == '"' and not in_single:
            in_double = not in_double
            buf.append(ch)
            continue

        if ch == ";" and not in_single and not in_double:
            stmt = "".join(buf).strip()
            buf.clear()
            if stmt:
                yield stmt
            continue

        buf.append(ch)

    tail = "".join(buf).strip()
    if tail:
        yield tail


def _connect(config: DBConfig, *, with_database: bool = True):
    try:
        return mysql.connector.connect(use_pure=True, **config.connect_kwargs(with_database=with_database))
    except mysql.connector.Error as e:
        raise StoreError(f"Cannot connect to database {config.describe()}: {e}") from e


def ensure_database_exists(config: DBConfig) -> None:
    conn = _connect(config, with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{config.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )
        conn.commit()
    except mysql.connector.Error as e:
        raise StoreError(f"Cannot create database {config.describe()}: {e}") from e
    finally:
        conn.close()


def applied_versions(cur) -> set[int]:
    cur.execute("SELECT version FROM schema_migrations")
    return {int(row[0]) for row in cur.fetchall()}


def run_migrations(cur, migrations: Sequence[Migration] = MIGRATIONS) -> list[int]:
    """Apply pending migrations in version order on an open cursor.

    MySQL commits DDL implicitly, so every step is recorded right after its
    statements succeed; a failed step leaves earlier steps recorded and is
    retried on the next start.
    """

    cur.execute(MIGRATIONS_TABLE_SQL)
    done = applied_versions(cur)

    newly_applied: list[int] = []
    for migration in sorted(migrations, key=lambda m: m.version):
        if migration.version in done:
            continue
        logger.info("Applying migration %04d: %s", migration.version, migration.description)
        for stmt in iter_sql_statements(migration.sql):
            cur.execute(stmt)
        cur.execute(
            "INSERT INTO schema_migrations(version, description) VALUES(%s, %s)",
            (migration.version, migration.description),
        )
        newly_applied.append(migration.version)
    return newly_applied


def apply_migrations(config: DBConfig, migrations: Sequence[Migration] = MIGRATIONS) -> list[int]:
    ensure_database_exists(config)

    conn = _connect(config)
    try:
        cur = conn.cursor()
        try:
            applied = run_migrations(cur, migrations)
            conn.commit()
        except mysql.connector.Error as e:
            conn.rollback()
            raise StoreError(f"Schema migration failed: {e}") from e
        finally:
            cur.close()
    finally:
        conn.close()

    if applied:
        logger.info("Applied %d migration(s) to %s", len(applied), config.describe())
    else:
        logger.info("Schema of %s is up to date", config.describe())
    return applied


def list_tables(config: DBConfig) -> list[str]:
    conn = _connect(config)
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    except mysql.connector.Error as e:
        raise StoreError(f"Cannot list tables of {config.describe()}: {e}") from e
    finally:
        conn.close()
