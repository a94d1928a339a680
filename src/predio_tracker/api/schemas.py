from __future__ import annotations

from typing import List, Optional, Union

from pydantic import BaseModel


class SetStatusBody(BaseModel):
    """POST /predios. Missing status means neutral; other fields are optional."""

    id_predio: Optional[Union[str, int]] = None
    status: Optional[str] = None
    seccion: Optional[Union[str, int]] = None
    usuario: Optional[str] = None


class LoginBody(BaseModel):
    usuario: Optional[str] = None
    secciones: Optional[Union[str, List[Union[str, int]]]] = None


class ParcelRow(BaseModel):
    id_predio: str
    status: str


class SectionStats(BaseModel):
    seccion: str
    rojo: int
    azul: int
    neutral: int
    total: int


class ActorRow(BaseModel):
    usuario: str
    last_seen: str
    secciones: Optional[str] = None


class ActivityRow(BaseModel):
    id_predio: str
    status: str
    seccion: Optional[str] = None
    usuario: Optional[str] = None
    created_at: str
