from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional

from .errors import ValidationError


SENTINEL_SECTION = "(sin seccion)"


class Status(str, Enum):
    RED = "rojo"
    BLUE = "azul"
    NEUTRAL = "neutral"

    @classmethod
    def parse(cls, value: Any) -> "Status":
        """Map a wire value to a Status. `None` means omitted and maps to neutral."""

        if value is None:
            return cls.NEUTRAL
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise ValidationError("status inválido") from None


STATUS_VALUES = tuple(s.value for s in Status)


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="microseconds")


@dataclass(frozen=True)
class Parcel:
    parcel_id: str
    status: str
    section: Optional[str]
    updated_at: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id_predio": self.parcel_id,
            "status": self.status,
            "seccion": self.section,
            "updated_at": self.updated_at,
        }


@dataclass(frozen=True)
class ChangeEvent:
    event_id: int
    parcel_id: str
    status: str
    section: Optional[str]
    actor: Optional[str]
    created_at: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id_predio": self.parcel_id,
            "status": self.status,
            "seccion": self.section,
            "usuario": self.actor,
            "created_at": self.created_at,
        }


@dataclass(frozen=True)
class Session:
    session_id: int
    actor: str
    sections: Optional[str]
    created_at: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "usuario": self.actor,
            "secciones": self.sections,
            "created_at": self.created_at,
        }


@dataclass(frozen=True)
class ResolvedParcel:
    """A parcel with its effective section (stored, else last logged, else None)."""

    parcel_id: str
    status: str
    section: Optional[str]

    @property
    def label(self) -> str:
        return self.section if self.section is not None else SENTINEL_SECTION


@dataclass(frozen=True)
class SectionSummary:
    section: str
    red: int
    blue: int
    neutral: int
    total: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "seccion": self.section,
            "rojo": self.red,
            "azul": self.blue,
            "neutral": self.neutral,
            "total": self.total,
        }


@dataclass(frozen=True)
class ActorSummary:
    actor: str
    last_seen: str
    sections: Optional[str]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "usuario": self.actor,
            "last_seen": self.last_seen,
            "secciones": self.sections,
        }
