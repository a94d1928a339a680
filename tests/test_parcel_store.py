import pytest

from predio_tracker.errors import StorageError
from predio_tracker.parcels import ParcelStore


def test_upsert_then_list_shows_latest_status(conn):
    store = ParcelStore(conn)
    with conn:
        store.upsert("P1", "rojo", "356")
    assert [(p.parcel_id, p.status) for p in store.list()] == [("P1", "rojo")]

    for status in ("azul", "neutral", "rojo", "rojo"):
        with conn:
            store.upsert("P1", status, "356")
        rows = store.list()
        assert [(p.parcel_id, p.status) for p in rows] == [("P1", status)]

    assert store.count() == 1


def test_upsert_replaces_section_and_updated_at(conn):
    store = ParcelStore(conn)
    with conn:
        store.upsert("P1", "rojo", "356", now="2024-01-01T00:00:00.000000+00:00")
        store.upsert("P1", "azul", None, now="2024-01-02T00:00:00.000000+00:00")
    parcel = store.get("P1")
    assert parcel.status == "azul"
    assert parcel.section is None
    assert parcel.updated_at == "2024-01-02T00:00:00.000000+00:00"


def test_upsert_defaults_to_neutral(conn):
    store = ParcelStore(conn)
    with conn:
        parcel = store.upsert("P9")
    assert parcel.status == "neutral"
    assert store.get("P9").status == "neutral"


def test_list_filters_on_stored_section_only(conn):
    store = ParcelStore(conn)
    with conn:
        store.upsert("A", "rojo", "356")
        store.upsert("B", "azul", "357")
        store.upsert("C", "neutral", None)
        # C's section is only recoverable from history; the filter must not see it.
        conn.execute(
            "INSERT INTO predio_logs (id_predio, status, seccion, usuario, created_at) "
            "VALUES ('C', 'neutral', '356', NULL, '2024-01-01T00:00:00.000000+00:00')"
        )

    assert [p.parcel_id for p in store.list(["356"])] == ["A"]
    assert [p.parcel_id for p in store.list({"356", "357"})] == ["A", "B"]
    assert [p.parcel_id for p in store.list([])] == ["A", "B", "C"]
    assert [p.parcel_id for p in store.list(["999"])] == []


def test_invalid_status_hits_check_constraint(conn):
    store = ParcelStore(conn)
    with pytest.raises(StorageError):
        with conn:
            store.upsert("P1", "verde")
    assert store.count() == 0


def test_get_missing_returns_none(conn):
    assert ParcelStore(conn).get("nope") is None
