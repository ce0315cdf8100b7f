# tests/test_events_api.py
from movment.models.enums import Role

from tests.conftest import auth, event_payload


def _create(client, user, **overrides):
    r = client.post("/api/v1/events", json=event_payload(**overrides), headers=auth(user))
    assert r.status_code == 201, r.text
    return r.json()


def test_create_returns_camel_case_event(client, make_user):
    user = make_user()
    ev = _create(client, user, mapLink="https://maps.example/x", lat=13.08, lng=80.27)
    assert ev["status"] == "pending"
    assert ev["bookedById"] == user.id
    assert ev["location"]["city"] == "Chennai"
    assert ev["location"]["coordinates"] == {"lat": 13.08, "lng": 80.27}
    assert ev["statusHistory"][0]["status"] == "pending"
    assert ev["autoAssignDeadline"] is not None

    mine = client.get("/api/v1/events/my", headers=auth(user)).json()
    assert [e["id"] for e in mine] == [ev["id"]]


def test_create_validation_is_400(client, make_user):
    r = client.post("/api/v1/events", json={"title": "x"}, headers=auth(make_user()))
    assert r.status_code == 400
    assert r.json() == {"detail": "Missing required fields", "code": "VALIDATION_ERROR"}


def test_managers_cannot_book(client, make_user):
    r = client.post("/api/v1/events", json=event_payload(), headers=auth(make_user(Role.MANAGER.value)))
    assert r.status_code == 403


def test_meta_and_suggestions(client, make_user):
    meta = client.get("/api/v1/events/meta").json()
    assert "birthday" in meta["eventTypes"]
    assert "photography" in meta["additionalServices"]

    s = client.get("/api/v1/events/suggestions", params={"guestCount": 35}, headers=auth(make_user())).json()
    assert s["suggestedStaffing"] == {"min": 2, "max": 4}
    assert len(s["suggestions"]) == 5


def test_accept_twice_conflicts(client, make_user):
    ev = _create(client, make_user())
    m1, m2 = make_user(Role.MANAGER.value), make_user(Role.MANAGER.value)

    r = client.post(f"/api/v1/events/{ev['id']}/accept", headers=auth(m1))
    assert r.status_code == 200
    assert r.json()["assignedManagerId"] == m1.id

    r = client.post(f"/api/v1/events/{ev['id']}/accept", headers=auth(m2))
    assert r.status_code == 400
    assert r.json()["detail"] == "Event is not in pending status"

    assigned = client.get("/api/v1/events/assigned", headers=auth(m1)).json()
    assert [e["id"] for e in assigned] == [ev["id"]]


def test_status_endpoint_enforces_transitions(client, make_user):
    ev = _create(client, make_user())
    m = make_user(Role.MANAGER.value)
    client.post(f"/api/v1/events/{ev['id']}/accept", headers=auth(m))

    r = client.post(f"/api/v1/events/{ev['id']}/status", json={"status": "completed"}, headers=auth(m))
    assert r.status_code == 400
    assert r.json()["detail"] == "Cannot change status from accepted to completed"

    r = client.post(f"/api/v1/events/{ev['id']}/status", json={"status": "bogus"}, headers=auth(m))
    assert r.status_code == 400

    for target in ("in_progress", "completed"):
        r = client.post(f"/api/v1/events/{ev['id']}/status", json={"status": target}, headers=auth(m))
        assert r.status_code == 200
    assert r.json()["status"] == "completed"


def test_cancel_and_reschedule_are_owner_only(client, make_user):
    owner, other = make_user(), make_user()
    ev = _create(client, owner)

    r = client.post(f"/api/v1/events/{ev['id']}/cancel", headers=auth(other))
    assert r.status_code == 403

    r = client.post(f"/api/v1/events/{ev['id']}/reschedule", json={}, headers=auth(owner))
    assert r.status_code == 400
    assert r.json()["detail"] == "New date/time required"

    r = client.post(
        f"/api/v1/events/{ev['id']}/reschedule",
        json={"scheduledAt": "2026-04-01T18:00:00+00:00"},
        headers=auth(owner),
    )
    assert r.status_code == 200
    assert r.json()["scheduledAt"].startswith("2026-04-01T18:00:00")

    r = client.post(f"/api/v1/events/{ev['id']}/cancel", headers=auth(owner))
    assert r.status_code == 200
    assert r.json()["status"] == "cancelled"

    r = client.post(f"/api/v1/events/{ev['id']}/cancel", headers=auth(owner))
    assert r.status_code == 400


def test_pending_with_radius_sorted_by_distance(client, make_user):
    user = make_user()
    near = _create(client, user, title="near", lat=13.0827, lng=80.2707)
    far = _create(client, user, title="far", lat=13.20, lng=80.30)
    _create(client, user, title="no coords")
    _create(client, user, title="bangalore", lat=12.97, lng=77.59)

    m = make_user(Role.MANAGER.value)
    rows = client.get(
        "/api/v1/events/pending",
        params={"lat": 13.08, "lng": 80.27, "radiusKm": 30},
        headers=auth(m),
    ).json()
    assert [r["id"] for r in rows] == [near["id"], far["id"]]
    assert rows[0]["distanceKm"] < rows[1]["distanceKm"]

    all_pending = client.get("/api/v1/events/pending", headers=auth(m)).json()
    assert len(all_pending) == 4


def test_unknown_event_is_404(client, make_user):
    r = client.post("/api/v1/events/9999/accept", headers=auth(make_user(Role.MANAGER.value)))
    assert r.status_code == 404
    assert r.json()["code"] == "NOT_FOUND"


def test_malformed_status_body_is_400(client, make_user):
    ev = _create(client, make_user())
    manager = make_user(Role.MANAGER.value)
    for body in ({}, {"status": None}, {"status": 5}):
        r = client.post(f"/api/v1/events/{ev['id']}/status", json=body, headers=auth(manager))
        assert r.status_code == 400, body
        assert r.json()["code"] == "VALIDATION_ERROR"
        assert r.json()["detail"].startswith("status: ")


def test_unparseable_fields_are_400(client, make_user):
    user = make_user()
    r = client.post("/api/v1/events", json=event_payload(scheduledAt="not-a-date"), headers=auth(user))
    assert r.status_code == 400
    assert r.json()["code"] == "VALIDATION_ERROR"
    assert r.json()["detail"].startswith("scheduledAt: ")

    ev = _create(client, user)
    r = client.post("/api/v1/user/payments", json={"eventId": ev["id"]}, headers=auth(user))
    assert r.status_code == 400
    assert r.json() == {"detail": "amount: Field required", "code": "VALIDATION_ERROR"}
