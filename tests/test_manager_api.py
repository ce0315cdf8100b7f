# tests/test_manager_api.py
from datetime import timedelta

from movment.models.enums import Role
from movment.services import lifecycle

from tests.conftest import NOW, auth


def _assigned(db, make_user, make_event, manager, **overrides):
    ev = make_event(make_user(), **overrides)
    lifecycle.accept_event(db, manager, ev.id, now=NOW)
    return ev


def test_events_list_filters(client, db, make_user, make_event):
    m = make_user(Role.MANAGER.value)
    a = _assigned(db, make_user, make_event, m, type="corporate", city="Chennai")
    b = _assigned(db, make_user, make_event, m, type="birthday", city="Madurai")
    make_event(make_user())  # pending, not ours

    rows = client.get("/api/v1/manager/events", headers=auth(m)).json()
    assert {r["id"] for r in rows} == {a.id, b.id}
    assert rows[0]["bookedBy"]["id"] is not None

    rows = client.get("/api/v1/manager/events", params={"type": "corporate"}, headers=auth(m)).json()
    assert [r["id"] for r in rows] == [a.id]
    rows = client.get("/api/v1/manager/events", params={"city": "madu"}, headers=auth(m)).json()
    assert [r["id"] for r in rows] == [b.id]


def test_calendar(client, db, make_user, make_event):
    m = make_user(Role.MANAGER.value)
    ev = _assigned(db, make_user, make_event, m)
    when = ev.scheduled_at

    r = client.get("/api/v1/manager/events/calendar", params={"year": when.year, "month": 13}, headers=auth(m))
    assert r.status_code == 400
    assert r.json()["detail"] == "Invalid month"

    rows = client.get("/api/v1/manager/events/calendar", params={"year": when.year, "month": when.month}, headers=auth(m)).json()
    assert [r["id"] for r in rows] == [ev.id]
    other_month = (when + timedelta(days=40))
    rows = client.get(
        "/api/v1/manager/events/calendar", params={"year": other_month.year, "month": other_month.month}, headers=auth(m)
    ).json()
    assert rows == []


def test_nearby_radius_is_clamped(client, make_user, make_event):
    owner = make_user()
    close = make_event(owner, lat=13.0827, lng=80.2707)
    make_event(owner, lat=13.30, lng=80.27)  # ~24 km north

    m = make_user(Role.MANAGER.value)
    # 1 km is clamped up to 5
    rows = client.get("/api/v1/manager/events/nearby", params={"lat": 13.08, "lng": 80.27, "radiusKm": 1}, headers=auth(m)).json()
    assert [r["id"] for r in rows] == [close.id]
    # default radius is 20
    rows = client.get("/api/v1/manager/events/nearby", params={"lat": 13.08, "lng": 80.27}, headers=auth(m)).json()
    assert [r["id"] for r in rows] == [close.id]
    rows = client.get("/api/v1/manager/events/nearby", params={"lat": 13.08, "lng": 80.27, "radiusKm": 500}, headers=auth(m)).json()
    assert len(rows) == 2


def test_team_and_remind_only_for_own_events(client, db, make_user, make_event):
    m = make_user(Role.MANAGER.value)
    ev = _assigned(db, make_user, make_event, m)

    r = client.post(f"/api/v1/manager/events/{ev.id}/team", json={"team": ["Anu", {"name": "Bala"}, " "]}, headers=auth(m))
    assert r.status_code == 200
    assert r.json()["assignedTeam"] == ["Anu", "Bala"]

    other = make_user(Role.MANAGER.value)
    assert client.post(f"/api/v1/manager/events/{ev.id}/team", json={"team": []}, headers=auth(other)).status_code == 403

    assert client.post(f"/api/v1/manager/events/{ev.id}/remind", headers=auth(m)).json() == {"message": "Reminder set"}
    notes = client.get("/api/v1/manager/notifications", headers=auth(m)).json()
    assert notes[0]["type"] == "reminder"
    assert notes[0]["relatedEventId"] == ev.id


def test_resources_crud(client, make_user):
    m = make_user(Role.MANAGER.value)
    r = client.post("/api/v1/manager/resources", json={"name": " Chairs ", "type": "equipment", "quantity": 50}, headers=auth(m))
    assert r.status_code == 201
    res = r.json()
    assert res["name"] == "Chairs"

    assert client.post("/api/v1/manager/resources", json={"name": "x", "type": "boats"}, headers=auth(m)).status_code == 400

    r = client.patch(f"/api/v1/manager/resources/{res['id']}", json={"quantity": 40, "available": False}, headers=auth(m))
    assert r.json()["quantity"] == 40
    assert r.json()["available"] is False

    other = make_user(Role.MANAGER.value)
    assert client.delete(f"/api/v1/manager/resources/{res['id']}", headers=auth(other)).status_code == 404
    assert client.delete(f"/api/v1/manager/resources/{res['id']}", headers=auth(m)).json() == {"message": "Deleted"}
    assert client.get("/api/v1/manager/resources", headers=auth(m)).json() == []


def test_performance_summary(client, db, make_user, make_event):
    m = make_user(Role.MANAGER.value)
    done = _assigned(db, make_user, make_event, m)
    lifecycle.advance_status(db, m, done.id, "in_progress")
    lifecycle.advance_status(db, m, done.id, "completed")
    _assigned(db, make_user, make_event, m)

    perf = client.get("/api/v1/manager/performance", headers=auth(m)).json()
    assert perf["total"] == 2
    assert perf["completed"] == 1
    assert perf["completionRate"] == 50
    assert perf["byStatus"]["accepted"] == 1


def test_location_update(client, make_user):
    m = make_user(Role.MANAGER.value)
    r = client.patch("/api/v1/manager/me/location", json={"lat": 12.9, "lng": 77.6, "city": " Bengaluru "}, headers=auth(m))
    assert r.json() == {"city": "Bengaluru", "area": None, "addressLine": None, "coordinates": {"lat": 12.9, "lng": 77.6}}


def test_users_are_kept_out(client, make_user):
    assert client.get("/api/v1/manager/events", headers=auth(make_user())).status_code == 403
