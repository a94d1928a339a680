from __future__ import annotations

import sqlite3
from typing import Iterable, List, Optional

from predio_tracker.db.connection import storage_errors
from predio_tracker.models import Parcel, Status, utc_now_iso


def _row_to_parcel(row: sqlite3.Row) -> Parcel:
    return Parcel(
        parcel_id=str(row["id_predio"]),
        status=str(row["status"]),
        section=row["seccion"],
        updated_at=str(row["updated_at"]),
    )


class ParcelStore:
    """Current status per parcel, one row per id, last write wins.

    Writes do not commit; the caller owns the transaction.
    """

    def __init__(self, conn: sqlite3.Connection) -> None:
        self.conn = conn

    def upsert(
        self,
        parcel_id: str,
        status: str = Status.NEUTRAL.value,
        section: Optional[str] = None,
        *,
        now: Optional[str] = None,
    ) -> Parcel:
        updated_at = now or utc_now_iso()
        with storage_errors("parcels.upsert"):
            self.conn.execute(
                """
                INSERT INTO predios (id_predio, status, seccion, updated_at)
                VALUES (?, ?, ?, ?)
                ON CONFLICT(id_predio) DO UPDATE SET
                    status=excluded.status,
                    seccion=excluded.seccion,
                    updated_at=excluded.updated_at
                """,
                (parcel_id, status, section, updated_at),
            )
        return Parcel(
            parcel_id=parcel_id, status=status, section=section, updated_at=updated_at
        )

    def get(self, parcel_id: str) -> Optional[Parcel]:
        with storage_errors("parcels.get"):
            row = self.conn.execute(
                "SELECT id_predio, status, seccion, updated_at FROM predios WHERE id_predio=?",
                (parcel_id,),
            ).fetchone()
        return _row_to_parcel(row) if row else None

    def list(self, sections: Optional[Iterable[str]] = None) -> List[Parcel]:
        # Matches the stored seccion column only, never the resolved section.
        wanted = sorted({s for s in (sections or []) if s})
        sql = "SELECT id_predio, status, seccion, updated_at FROM predios"
        params: list[object] = []
        if wanted:
            sql += " WHERE seccion IN (" + ",".join("?" * len(wanted)) + ")"
            params.extend(wanted)
        sql += " ORDER BY id_predio"
        with storage_errors("parcels.list"):
            rows = self.conn.execute(sql, params).fetchall()
        return [_row_to_parcel(r) for r in rows]

    def count(self) -> int:
        with storage_errors("parcels.count"):
            row = self.conn.execute("SELECT COUNT(*) FROM predios").fetchone()
        return int(row[0])
