from __future__ import annotations

import sqlite3
from typing import Any, List, Optional

from predio_tracker.db.connection import storage_errors
from predio_tracker.models import ActorSummary, Session, utc_now_iso


def normalize_sections(values: Any) -> Optional[str]:
    """Encode a session's sections as one opaque string.

    Strings are kept as sent; lists are cleaned and comma-joined. Empty
    input becomes None.
    """

    if values is None:
        return None
    if isinstance(values, str):
        return values if values.strip() else None
    if isinstance(values, (list, tuple, set)):
        out: List[str] = []
        for v in values:
            if v is None:
                continue
            s = str(v).strip()
            if s and s not in out:
                out.append(s)
        return ",".join(out) or None
    s = str(values).strip()
    return s or None


class SessionLog:
    """Insert-only session rows; several per actor are expected."""

    def __init__(self, conn: sqlite3.Connection) -> None:
        self.conn = conn

    def record(
        self, actor: str, sections: Any = None, *, now: Optional[str] = None
    ) -> Session:
        created_at = now or utc_now_iso()
        encoded = normalize_sections(sections)
        with storage_errors("sessions.record"):
            cur = self.conn.execute(
                "INSERT INTO user_sessions (usuario, secciones, created_at) VALUES (?, ?, ?)",
                (actor, encoded, created_at),
            )
        return Session(
            session_id=int(cur.lastrowid),
            actor=actor,
            sections=encoded,
            created_at=created_at,
        )


class ActorDirectory:
    def __init__(self, conn: sqlite3.Connection) -> None:
        self.conn = conn

    def list_actors(self) -> List[ActorSummary]:
        """One row per actor, most recently seen first.

        `sections` is the distinct set of recorded section strings joined with
        commas, or None when the actor never sent any. One statement, so
        last_seen and sections come from the same snapshot.
        """

        with storage_errors("actors.list_actors"):
            rows = self.conn.execute(
                """
                SELECT
                    usuario,
                    MAX(created_at) AS last_seen,
                    group_concat(DISTINCT secciones) AS secciones
                FROM (
                    SELECT usuario, secciones, created_at
                    FROM user_sessions
                    ORDER BY usuario, secciones
                )
                GROUP BY usuario
                ORDER BY last_seen DESC, usuario
                """
            ).fetchall()

        return [
            ActorSummary(
                actor=str(r["usuario"]),
                last_seen=str(r["last_seen"]),
                sections=r["secciones"],
            )
            for r in rows
        ]
