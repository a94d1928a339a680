import os
import socket
import sys
import urllib.request
from pathlib import Path

import pytest


REPO_ROOT = Path(__file__).resolve().parents[1]
SRC = REPO_ROOT / "src"

# Prefer repo sources over any installed package.
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))


@pytest.fixture(autouse=True)
def block_network(monkeypatch):
    if os.getenv("LIVE") == "1":
        return

    real_connect = socket.socket.connect

    def guarded_connect(sock, address):
        host = address[0] if isinstance(address, tuple) else address
        if host not in ("127.0.0.1", "localhost"):
            raise RuntimeError("Network access blocked in tests")
        return real_connect(sock, address)

    monkeypatch.setattr(socket.socket, "connect", guarded_connect)
    monkeypatch.setattr(
        urllib.request,
        "urlopen",
        lambda *args, **kwargs: (_ for _ in ()).throw(
            RuntimeError("Network access blocked in tests")
        ),
    )


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch, tmp_path):
    from predio_tracker.config import reset_settings_cache

    monkeypatch.setenv("PREDIOS_DB", str(tmp_path / "predios.sqlite"))
    monkeypatch.delenv("API_KEY", raising=False)
    monkeypatch.delenv("PREDIOS_ACTIVITY_DEFAULT_LIMIT", raising=False)
    reset_settings_cache()
    yield
    reset_settings_cache()


@pytest.fixture
def db_path(tmp_path):
    return str(tmp_path / "predios.sqlite")


@pytest.fixture
def conn(db_path):
    from predio_tracker.db import ensure_schema, open_conn

    with open_conn(db_path) as c:
        ensure_schema(c)
        yield c


@pytest.fixture
def service(db_path):
    from predio_tracker.db import init_db
    from predio_tracker.service import PredioService

    init_db(db_path)
    with PredioService.open(db_path) as svc:
        yield svc
