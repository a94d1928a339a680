from __future__ import annotations

import logging
import sqlite3

from predio_tracker.config import get_settings
from predio_tracker.db.connection import open_conn, storage_errors
from predio_tracker.models import STATUS_VALUES


_STATUS_CHECK = ", ".join(f"'{v}'" for v in STATUS_VALUES)

DDL = (
    f"""
    CREATE TABLE IF NOT EXISTS predios (
        id_predio TEXT PRIMARY KEY,
        status TEXT NOT NULL DEFAULT 'neutral' CHECK (status IN ({_STATUS_CHECK})),
        seccion TEXT,
        updated_at TEXT NOT NULL
    )
    """,
    "CREATE INDEX IF NOT EXISTS idx_predios_seccion ON predios(seccion)",
    f"""
    CREATE TABLE IF NOT EXISTS predio_logs (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        id_predio TEXT NOT NULL,
        status TEXT NOT NULL CHECK (status IN ({_STATUS_CHECK})),
        seccion TEXT,
        usuario TEXT,
        created_at TEXT NOT NULL
    )
    """,
    "CREATE INDEX IF NOT EXISTS idx_predio_logs_predio_created ON predio_logs(id_predio, created_at)",
    "CREATE INDEX IF NOT EXISTS idx_predio_logs_created ON predio_logs(created_at)",
    """
    CREATE TABLE IF NOT EXISTS user_sessions (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        usuario TEXT NOT NULL,
        secciones TEXT,
        created_at TEXT NOT NULL
    )
    """,
    "CREATE INDEX IF NOT EXISTS idx_user_sessions_usuario ON user_sessions(usuario)",
)


def ensure_schema(conn: sqlite3.Connection) -> None:
    with storage_errors("ensure_schema"):
        with conn:
            for statement in DDL:
                conn.execute(statement)


def init_db(db_path: str | None = None) -> str:
    db_path = db_path or get_settings().db_path
    with open_conn(db_path) as conn:
        ensure_schema(conn)
    logging.getLogger("predios.startup").info("tables verified at %s", db_path)
    return db_path
