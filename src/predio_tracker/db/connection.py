from __future__ import annotations

import logging
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from predio_tracker.config import get_settings
from predio_tracker.errors import StorageError


logger = logging.getLogger("predios.storage")


@contextmanager
def storage_errors(operation: str) -> Iterator[None]:
    """Turn any sqlite3 or filesystem failure inside the block into a StorageError."""

    try:
        yield
    except (sqlite3.Error, OSError) as exc:
        logger.exception("storage failure during %s", operation)
        raise StorageError(operation) from exc


def connect(path: str | None = None, *, timeout: float | None = None) -> sqlite3.Connection:
    settings = get_settings()
    db_path = Path(path or settings.db_path)
    if timeout is None:
        timeout = settings.db_timeout_s
    with storage_errors("connect"):
        db_path.parent.mkdir(parents=True, exist_ok=True)
        # One connection per request; FastAPI may hand it across worker threads.
        conn = sqlite3.connect(str(db_path), timeout=timeout, check_same_thread=False)
        conn.row_factory = sqlite3.Row
    return conn


@contextmanager
def open_conn(path: str | None = None):
    conn = connect(path)
    try:
        yield conn
    finally:
        conn.close()
