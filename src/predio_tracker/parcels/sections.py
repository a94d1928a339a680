from __future__ import annotations

import sqlite3
from typing import List, Optional

from predio_tracker.db.connection import storage_errors
from predio_tracker.models import ResolvedParcel
from predio_tracker.parcels.change_log import ChangeLog
from predio_tracker.parcels.store import ParcelStore


class SectionResolver:
    """Effective section of a parcel, for reporting only.

    Stored section if present, else the section of the most recent change
    event that carried one, else None (the sentinel bucket). Never writes.
    """

    def __init__(
        self,
        conn: sqlite3.Connection,
        *,
        parcels: Optional[ParcelStore] = None,
        change_log: Optional[ChangeLog] = None,
    ) -> None:
        self.conn = conn
        self.parcels = parcels or ParcelStore(conn)
        self.change_log = change_log or ChangeLog(conn)

    def resolve(self, parcel_id: str) -> Optional[str]:
        parcel = self.parcels.get(parcel_id)
        if parcel is not None and parcel.section is not None:
            return parcel.section
        event = self.change_log.recent_for(parcel_id)
        return event.section if event is not None else None

    def resolved_parcels(self) -> List[ResolvedParcel]:
        """Every parcel with its effective section, in one correlated query."""

        with storage_errors("sections.resolved_parcels"):
            rows = self.conn.execute(
                """
                SELECT
                    p.id_predio,
                    p.status,
                    COALESCE(
                        p.seccion,
                        (SELECT pl.seccion FROM predio_logs pl
                         WHERE pl.id_predio = p.id_predio AND pl.seccion IS NOT NULL
                         ORDER BY pl.created_at DESC, pl.id DESC
                         LIMIT 1)
                    ) AS seccion
                FROM predios p
                ORDER BY p.id_predio
                """
            ).fetchall()
        return [
            ResolvedParcel(
                parcel_id=str(r["id_predio"]), status=str(r["status"]), section=r["seccion"]
            )
            for r in rows
        ]
