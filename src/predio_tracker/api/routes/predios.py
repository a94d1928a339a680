from __future__ import annotations

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from predio_tracker.api.deps import get_service, require_api_key
from predio_tracker.api.schemas import ActivityRow, ParcelRow, SetStatusBody
from predio_tracker.service import PredioService, parse_sections_param


router = APIRouter(tags=["predios"], dependencies=[Depends(require_api_key)])


@router.get("/predios", response_model=List[ParcelRow])
def list_predios(
    secciones: Optional[str] = None,
    service: PredioService = Depends(get_service),
) -> List[Dict[str, Any]]:
    sections = parse_sections_param(secciones)
    return [
        {"id_predio": p.parcel_id, "status": p.status}
        for p in service.list_parcels(sections)
    ]


@router.post("/predios")
def set_predio_status(
    body: SetStatusBody, service: PredioService = Depends(get_service)
) -> Dict[str, Any]:
    service.set_status(body.id_predio, body.status, body.seccion, body.usuario)
    return {"ok": True}


@router.get("/predios/{id_predio}")
def get_predio(id_predio: str, service: PredioService = Depends(get_service)):
    found = service.get_parcel(id_predio)
    if found is None:
        return JSONResponse({"error": "not_found"}, status_code=404)
    parcel, effective = found
    return {**parcel.to_dict(), "seccion_efectiva": effective}


@router.get("/predios/{id_predio}/historial", response_model=List[ActivityRow])
def predio_history(
    id_predio: str,
    limit: Optional[str] = None,
    service: PredioService = Depends(get_service),
) -> List[Dict[str, Any]]:
    return [e.to_dict() for e in service.parcel_history(id_predio, limit)]
