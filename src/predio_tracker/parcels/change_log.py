from __future__ import annotations

import re
import sqlite3
from typing import Any, List, Optional

from predio_tracker.db.connection import storage_errors
from predio_tracker.models import ChangeEvent, utc_now_iso


LIMIT_FLOOR = 1
LIMIT_CAP = 500
DEFAULT_LIMIT = 100

_COLUMNS = "id, id_predio, status, seccion, usuario, created_at"
_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def clamp_limit(limit: Any, *, default: int = DEFAULT_LIMIT) -> int:
    """Coerce a caller-supplied limit into [LIMIT_FLOOR, LIMIT_CAP].

    Out-of-range values are clamped, never rejected. The leading integer of
    the value is used ("2.5" -> 2, "12abc" -> 12); missing values or values
    without one use `default` (itself clamped).
    """

    value = default
    match = _LEADING_INT.match(str(limit)) if limit is not None else None
    if match:
        value = int(match.group(1))
    return max(LIMIT_FLOOR, min(int(value), LIMIT_CAP))


def _row_to_event(row: sqlite3.Row) -> ChangeEvent:
    return ChangeEvent(
        event_id=int(row["id"]),
        parcel_id=str(row["id_predio"]),
        status=str(row["status"]),
        section=row["seccion"],
        actor=row["usuario"],
        created_at=str(row["created_at"]),
    )


class ChangeLog:
    """Append-only record of every accepted status change.

    `append` does not commit; the caller owns the transaction.
    """

    def __init__(self, conn: sqlite3.Connection) -> None:
        self.conn = conn

    def _latest_created_at(self, parcel_id: str) -> Optional[str]:
        row = self.conn.execute(
            "SELECT MAX(created_at) FROM predio_logs WHERE id_predio=?",
            (parcel_id,),
        ).fetchone()
        return row[0] if row else None

    def append(
        self,
        parcel_id: str,
        status: str,
        section: Optional[str] = None,
        actor: Optional[str] = None,
        *,
        now: Optional[str] = None,
    ) -> ChangeEvent:
        with storage_errors("change_log.append"):
            created_at = now or utc_now_iso()
            latest = self._latest_created_at(parcel_id)
            # Per-parcel history never goes backwards, even if the clock does.
            if latest is not None and latest > created_at:
                created_at = latest
            cur = self.conn.execute(
                """
                INSERT INTO predio_logs (id_predio, status, seccion, usuario, created_at)
                VALUES (?, ?, ?, ?, ?)
                """,
                (parcel_id, status, section, actor, created_at),
            )
        return ChangeEvent(
            event_id=int(cur.lastrowid),
            parcel_id=parcel_id,
            status=status,
            section=section,
            actor=actor,
            created_at=created_at,
        )

    def recent_for(self, parcel_id: str) -> Optional[ChangeEvent]:
        """Most recent event for the parcel that carried a section."""

        with storage_errors("change_log.recent_for"):
            row = self.conn.execute(
                f"""
                SELECT {_COLUMNS} FROM predio_logs
                WHERE id_predio=? AND seccion IS NOT NULL
                ORDER BY created_at DESC, id DESC
                LIMIT 1
                """,
                (parcel_id,),
            ).fetchone()
        return _row_to_event(row) if row else None

    def list(self, limit: Any = DEFAULT_LIMIT) -> List[ChangeEvent]:
        lim = clamp_limit(limit)
        with storage_errors("change_log.list"):
            rows = self.conn.execute(
                f"SELECT {_COLUMNS} FROM predio_logs ORDER BY created_at DESC, id DESC LIMIT ?",
                (lim,),
            ).fetchall()
        return [_row_to_event(r) for r in rows]

    def history_for(self, parcel_id: str, limit: Any = DEFAULT_LIMIT) -> List[ChangeEvent]:
        lim = clamp_limit(limit)
        with storage_errors("change_log.history_for"):
            rows = self.conn.execute(
                f"""
                SELECT {_COLUMNS} FROM predio_logs
                WHERE id_predio=?
                ORDER BY created_at DESC, id DESC
                LIMIT ?
                """,
                (parcel_id, lim),
            ).fetchall()
        return [_row_to_event(r) for r in rows]

    def count(self, parcel_id: Optional[str] = None) -> int:
        sql = "SELECT COUNT(*) FROM predio_logs"
        params: tuple = ()
        if parcel_id is not None:
            sql += " WHERE id_predio=?"
            params = (parcel_id,)
        with storage_errors("change_log.count"):
            row = self.conn.execute(sql, params).fetchone()
        return int(row[0])
