import sqlite3

import pytest

from predio_tracker.errors import StorageError, ValidationError
from predio_tracker.parcels import ChangeLog


def _counts(service):
    parcels = service.conn.execute("SELECT COUNT(*) FROM predios").fetchone()[0]
    logs = service.conn.execute("SELECT COUNT(*) FROM predio_logs").fetchone()[0]
    return parcels, logs


def test_same_parcel_twice_one_row_two_events(service):
    service.set_status("P1", "rojo", "356", "ana")
    service.set_status("P1", "azul", "356", "beto")
    assert _counts(service) == (1, 2)
    assert [(p.parcel_id, p.status) for p in service.list_parcels()] == [("P1", "azul")]
    assert [e.actor for e in service.activity()] == ["beto", "ana"]


def test_event_mirrors_the_write(service):
    parcel, event = service.set_status(" P7 ", None, " 356 ", "ana")
    assert parcel.parcel_id == "P7"
    assert parcel.status == "neutral"
    assert event.section == "356"
    assert event.created_at == parcel.updated_at


@pytest.mark.parametrize(
    "kwargs,message",
    [
        ({"parcel_id": None, "status": "rojo"}, "id_predio requerido"),
        ({"parcel_id": "   ", "status": "rojo"}, "id_predio requerido"),
        ({"parcel_id": "P1", "status": "verde"}, "status inválido"),
        ({"parcel_id": "P1", "status": ""}, "status inválido"),
        ({"parcel_id": "P1", "status": "ROJO"}, "status inválido"),
    ],
)
def test_validation_happens_before_storage(service, kwargs, message):
    with pytest.raises(ValidationError) as excinfo:
        service.set_status(**kwargs)
    assert str(excinfo.value) == message
    assert _counts(service) == (0, 0)


def test_login_requires_actor(service):
    with pytest.raises(ValidationError, match="usuario requerido"):
        service.record_login("  ")
    service.record_login("ana", ["356", "357"])
    (actor,) = service.list_actors()
    assert actor.sections == "356,357"


def test_failed_append_rolls_back_upsert(service, monkeypatch):
    def broken_append(self, *args, **kwargs):
        raise sqlite3.OperationalError("disk I/O error")

    monkeypatch.setattr(ChangeLog, "append", broken_append)
    with pytest.raises(StorageError):
        service.set_status("P1", "rojo", "356", "ana")
    assert _counts(service) == (0, 0)


def test_read_failure_surfaces_as_storage_error(service):
    service.conn.execute("DROP TABLE predio_logs")
    with pytest.raises(StorageError):
        service.activity(10)
    with pytest.raises(StorageError):
        service.summarize()


def test_activity_uses_configured_default(service, monkeypatch):
    from predio_tracker.config import reset_settings_cache

    for i in range(5):
        service.set_status(f"P{i}", "rojo")
    monkeypatch.setenv("PREDIOS_ACTIVITY_DEFAULT_LIMIT", "2")
    reset_settings_cache()
    assert len(service.activity()) == 2
    assert len(service.activity("garbage")) == 2
    assert len(service.activity("4")) == 4
    assert len(service.activity("3.9")) == 3


def test_get_parcel_reports_effective_section(service):
    service.set_status("P2", "rojo", "357")
    service.set_status("P2", "azul")
    parcel, effective = service.get_parcel("P2")
    assert parcel.section is None
    assert effective == "357"
    assert service.get_parcel("nope") is None
