from __future__ import annotations

from typing import Iterator, Optional

from fastapi import Header

from predio_tracker.config import get_settings
from predio_tracker.errors import AuthError
from predio_tracker.security import bearer_matches
from predio_tracker.service import PredioService


def require_api_key(authorization: Optional[str] = Header(default=None)) -> None:
    if not bearer_matches(authorization, get_settings().api_key):
        raise AuthError("unauthorized")


def get_service() -> Iterator[PredioService]:
    service = PredioService.open(get_settings().db_path)
    try:
        yield service
    finally:
        service.close()
