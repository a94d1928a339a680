"""Dashboard reports: section stats, actor directory, recent activity, logins."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends

from predio_tracker.api.deps import get_service, require_api_key
from predio_tracker.api.schemas import ActivityRow, ActorRow, LoginBody, SectionStats
from predio_tracker.service import PredioService


router = APIRouter(tags=["reports"], dependencies=[Depends(require_api_key)])


@router.post("/login")
def login(body: LoginBody, service: PredioService = Depends(get_service)) -> Dict[str, Any]:
    service.record_login(body.usuario, body.secciones)
    return {"ok": True}


@router.get("/stats", response_model=List[SectionStats])
def stats(service: PredioService = Depends(get_service)) -> List[Dict[str, Any]]:
    return [s.to_dict() for s in service.summarize()]


@router.get("/users", response_model=List[ActorRow])
def users(service: PredioService = Depends(get_service)) -> List[Dict[str, Any]]:
    return [a.to_dict() for a in service.list_actors()]


@router.get("/activity", response_model=List[ActivityRow])
def activity(
    limit: Optional[str] = None, service: PredioService = Depends(get_service)
) -> List[Dict[str, Any]]:
    # limit is a string so garbage falls back to the default instead of a 422.
    return [e.to_dict() for e in service.activity(limit)]
