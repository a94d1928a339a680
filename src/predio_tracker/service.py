"""Request-level operations over the parcel, history and session stores.

Each public method maps to one operation of the HTTP surface. Inputs are
validated before any store is touched; a status write updates the current
state and appends to the history inside one transaction, so a failed append
leaves no trace in either table.
"""

from __future__ import annotations

import logging
import sqlite3
from typing import Any, Iterable, List, Optional, Tuple

from predio_tracker.actors import ActorDirectory, SessionLog
from predio_tracker.config import get_settings
from predio_tracker.db.connection import connect, storage_errors
from predio_tracker.errors import ValidationError
from predio_tracker.models import (
    ActorSummary,
    ChangeEvent,
    Parcel,
    SectionSummary,
    Session,
    Status,
)
from predio_tracker.parcels import (
    Aggregator,
    ChangeLog,
    ParcelStore,
    SectionResolver,
    clamp_limit,
)


logger = logging.getLogger("predios.write")


def _clean_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def parse_sections_param(raw: Optional[str]) -> List[str]:
    """`"356, 357,,"` -> `["356", "357"]`."""

    return [s.strip() for s in (raw or "").split(",") if s.strip()]


class PredioService:
    def __init__(self, conn: sqlite3.Connection) -> None:
        self.conn = conn
        self.parcels = ParcelStore(conn)
        self.change_log = ChangeLog(conn)
        self.resolver = SectionResolver(
            conn, parcels=self.parcels, change_log=self.change_log
        )
        self.aggregator = Aggregator(self.resolver)
        self.sessions = SessionLog(conn)
        self.actors = ActorDirectory(conn)

    @classmethod
    def open(cls, path: Optional[str] = None) -> "PredioService":
        return cls(connect(path))

    def close(self) -> None:
        if self.conn is not None:
            self.conn.close()
            self.conn = None

    def __enter__(self) -> "PredioService":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    # ---- writes ---------------------------------------------------------

    def set_status(
        self,
        parcel_id: Any,
        status: Any = None,
        section: Any = None,
        actor: Any = None,
    ) -> Tuple[Parcel, ChangeEvent]:
        pid = _clean_text(parcel_id)
        if pid is None:
            raise ValidationError("id_predio requerido")
        status_value = Status.parse(status).value
        section_value = _clean_text(section)
        actor_value = _clean_text(actor)

        with storage_errors("set_status"):
            with self.conn:
                parcel = self.parcels.upsert(pid, status_value, section_value)
                event = self.change_log.append(
                    pid, status_value, section_value, actor_value, now=parcel.updated_at
                )
        logger.info(
            "status set id_predio=%s status=%s seccion=%s usuario=%s",
            pid,
            status_value,
            section_value,
            actor_value,
        )
        return parcel, event

    def record_login(self, actor: Any, sections: Any = None) -> Session:
        actor_value = _clean_text(actor)
        if actor_value is None:
            raise ValidationError("usuario requerido")
        with storage_errors("record_login"):
            with self.conn:
                session = self.sessions.record(actor_value, sections)
        logging.getLogger("predios.sessions").info("login usuario=%s", actor_value)
        return session

    # ---- reads ----------------------------------------------------------

    def list_parcels(self, sections: Optional[Iterable[str]] = None) -> List[Parcel]:
        return self.parcels.list(sections)

    def get_parcel(self, parcel_id: str) -> Optional[Tuple[Parcel, Optional[str]]]:
        parcel = self.parcels.get(parcel_id)
        if parcel is None:
            return None
        return parcel, self.resolver.resolve(parcel_id)

    def parcel_history(self, parcel_id: str, limit: Any = None) -> List[ChangeEvent]:
        return self.change_log.history_for(parcel_id, self._limit(limit))

    def summarize(self) -> List[SectionSummary]:
        return self.aggregator.summarize()

    def list_actors(self) -> List[ActorSummary]:
        return self.actors.list_actors()

    def activity(self, limit: Any = None) -> List[ChangeEvent]:
        return self.change_log.list(self._limit(limit))

    @staticmethod
    def _limit(limit: Any) -> int:
        return clamp_limit(limit, default=get_settings().activity_default_limit)
