import pytest

from predio_tracker.parcels import ChangeLog, clamp_limit


def _fill(conn, n, parcel_id="P1"):
    log = ChangeLog(conn)
    with conn:
        for i in range(n):
            log.append(parcel_id, "rojo", None, "ana", now=f"2024-01-01T00:00:00.{i:06d}+00:00")
    return log


def test_append_never_dedupes(conn):
    log = ChangeLog(conn)
    with conn:
        log.append("P1", "rojo", "356", "ana")
        log.append("P1", "rojo", "356", "ana")
    assert log.count("P1") == 2


def test_created_at_never_goes_backwards(conn):
    log = ChangeLog(conn)
    with conn:
        first = log.append("P1", "rojo", now="2024-05-01T12:00:00.000000+00:00")
        second = log.append("P1", "azul", now="2024-04-01T12:00:00.000000+00:00")
    assert second.created_at >= first.created_at
    assert [e.status for e in log.list()] == ["azul", "rojo"]


def test_other_parcels_keep_their_own_clock(conn):
    log = ChangeLog(conn)
    with conn:
        log.append("P1", "rojo", now="2024-05-01T12:00:00.000000+00:00")
        other = log.append("P2", "azul", now="2024-04-01T12:00:00.000000+00:00")
    assert other.created_at == "2024-04-01T12:00:00.000000+00:00"


def test_recent_for_skips_events_without_section(conn):
    log = ChangeLog(conn)
    with conn:
        log.append("P2", "rojo", "356", now="2024-01-01T00:00:00.000000+00:00")
        log.append("P2", "azul", "357", now="2024-01-02T00:00:00.000000+00:00")
        log.append("P2", "azul", None, now="2024-01-03T00:00:00.000000+00:00")
    event = log.recent_for("P2")
    assert event.section == "357"
    assert log.recent_for("missing") is None


def test_recent_for_none_when_no_section_ever(conn):
    log = ChangeLog(conn)
    with conn:
        log.append("P3", "rojo")
    assert log.recent_for("P3") is None


def test_list_caps_at_500(conn):
    log = _fill(conn, 510)
    assert len(log.list(999)) == 500


def test_list_floor_is_one(conn):
    log = _fill(conn, 3)
    assert len(log.list(0)) == 1
    assert len(log.list(-20)) == 1


def test_list_orders_newest_first(conn):
    log = _fill(conn, 5)
    rows = log.list(10)
    stamps = [e.created_at for e in rows]
    assert stamps == sorted(stamps, reverse=True)


def test_history_for_one_parcel(conn):
    log = ChangeLog(conn)
    with conn:
        log.append("P1", "rojo", now="2024-01-01T00:00:00.000000+00:00")
        log.append("P2", "azul", now="2024-01-02T00:00:00.000000+00:00")
        log.append("P1", "neutral", now="2024-01-03T00:00:00.000000+00:00")
    assert [e.status for e in log.history_for("P1")] == ["neutral", "rojo"]


@pytest.mark.parametrize(
    "raw,expected",
    [
        (None, 100),
        ("", 100),
        ("abc", 100),
        ("2.5", 2),
        ("12abc", 12),
        ("  8 rows", 8),
        ("0", 1),
        (0, 1),
        ("-3", 1),
        ("42", 42),
        (" 7 ", 7),
        ("999", 500),
        (500, 500),
    ],
)
def test_clamp_limit(raw, expected):
    assert clamp_limit(raw) == expected


def test_clamp_limit_clamps_the_default_too():
    assert clamp_limit(None, default=10_000) == 500
