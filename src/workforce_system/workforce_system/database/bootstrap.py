"""Schema and demo-data setup for a local MySQL server."""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterator

import mysql.connector

from .connection import DBConfig

logger = logging.getLogger(__name__)

_CREATE_OR_USE_DB = re.compile(r"(?im)^\s*(CREATE\s+DATABASE|USE)\b.*?;\s*$")

_DEFAULTS = {
    "host": "localhost",
    "port": 3306,
    "user": "root",
    "password": "",
    "database": "workforce_db",
}


def _target(db_config: dict) -> DBConfig:
    return DBConfig.from_dict({**_DEFAULTS, **{k: v for k, v in db_config.items() if v is not None}})


def _connect(target: DBConfig, *, with_database: bool = True):
    kwargs = dict(
        host=target.host,
        port=target.port,
        user=target.user,
        password=target.password,
        connection_timeout=target.connection_timeout,
        use_pure=True,
    )
    if with_database:
        kwargs["database"] = target.database
    return mysql.connector.connect(**kwargs)


def iter_sql_statements(sql: str) -> Iterator[str]:
    """Split a script on ``;`` outside quoted strings.

    ``CREATE DATABASE`` and ``USE`` lines are dropped so a script always runs
    against the configured database.
    """

    sql = _CREATE_OR_USE_DB.sub("", sql)
    buf: list[str] = []
    quote = None
    escaped = False

    for ch in sql:
        if escaped:
            escaped = False
        elif ch == "\\":
            escaped = True
        elif quote:
            if ch == quote:
                quote = None
        elif ch in ("'", '"'):
            quote = ch
        elif ch == ";":
            stmt = "".join(buf).strip()
            buf = []
            if stmt:
                yield stmt
            continue
        buf.append(ch)

    tail = "".join(buf).strip()
    if tail:
        yield tail


def ensure_database_exists(db_config: dict) -> None:
    target = _target(db_config)
    conn = _connect(target, with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{target.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )
        conn.commit()
    finally:
        conn.close()


def _run_script(db_config: dict, path: str | Path) -> int:
    statements = list(iter_sql_statements(Path(path).read_text(encoding="utf-8")))
    conn = _connect(_target(db_config))
    try:
        cur = conn.cursor()
        for stmt in statements:
            cur.execute(stmt)
        conn.commit()
    finally:
        conn.close()
    logger.info("Ran %d statements from %s", len(statements), Path(path).name)
    return len(statements)


def apply_schema(db_config: dict, *, schema_path: str | Path) -> int:
    ensure_database_exists(db_config)
    return _run_script(db_config, schema_path)


def apply_seed_sql(db_config: dict, *, seed_path: str | Path) -> int:
    return _run_script(db_config, seed_path)


def list_tables(db_config: dict) -> list[str]:
    conn = _connect(_target(db_config))
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()
