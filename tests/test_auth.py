# tests/test_auth.py
from movment.api.deps import PENDING_APPROVAL
from movment.models.enums import Role

from tests.conftest import auth


def _register(client, **overrides):
    body = {"name": "Ravi", "email": "Ravi@Example.com", "password": "secret123"}
    body.update(overrides)
    return client.post("/api/v1/auth/register", json=body)


def test_register_and_login(client):
    r = _register(client, phone="9876543210")
    assert r.status_code == 201, r.text
    data = r.json()
    assert data["email"] == "ravi@example.com"
    assert data["role"] == "user"
    assert data["approved"] is True
    assert "passwordHash" not in data

    r = client.post("/api/v1/auth/login", json={"email": "RAVI@example.com", "password": "secret123"})
    assert r.status_code == 200, r.text
    token = r.json()["token"]
    assert r.json()["user"]["email"] == "ravi@example.com"

    me = client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert me.status_code == 200
    assert me.json()["name"] == "Ravi"

    by_phone = client.post("/api/v1/auth/login", json={"phone": "9876543210", "password": "secret123"})
    assert by_phone.status_code == 200


def test_register_rejects_duplicates_and_elevated_roles(client):
    assert _register(client).status_code == 201
    dup = _register(client, email="ravi@example.com")
    assert dup.status_code == 409
    assert dup.json()["detail"] == "Email already registered"

    r = _register(client, email="x@example.com", role="admin")
    assert r.status_code == 400
    assert r.json()["detail"] == "Role must be user or manager"


def test_login_wrong_password(client):
    _register(client)
    r = client.post("/api/v1/auth/login", json={"email": "ravi@example.com", "password": "nope-nope"})
    assert r.status_code == 401
    assert r.json()["detail"] == "Invalid credentials"


def test_unapproved_manager_cannot_login(client):
    r = _register(client, email="mgr@example.com", role="manager")
    assert r.status_code == 201
    assert r.json()["approved"] is False

    r = client.post("/api/v1/auth/login", json={"email": "mgr@example.com", "password": "secret123"})
    assert r.status_code == 403
    assert r.json()["detail"] == PENDING_APPROVAL


def test_unapproved_manager_token_is_refused(client, make_user):
    pending = make_user(Role.MANAGER.value, approved=False)
    r = client.get("/api/v1/events/assigned", headers=auth(pending))
    assert r.status_code == 403
    assert r.json()["detail"] == PENDING_APPROVAL


def test_missing_or_bad_token(client):
    assert client.get("/api/v1/auth/me").status_code == 401
    r = client.get("/api/v1/auth/me", headers={"Authorization": "Bearer not-a-jwt"})
    assert r.status_code == 401
    assert r.json()["detail"] == "Invalid or expired token"
    r = client.get("/api/v1/auth/me", headers={"Authorization": "Token abc"})
    assert r.json()["detail"] == "Invalid Authorization header"


def test_demoted_admin_loses_access_on_next_request(client, make_user, owner):
    admin = make_user(Role.ADMIN.value)
    headers = auth(admin)
    assert client.get("/api/v1/admin/users", headers=headers).status_code == 200

    r = client.post(f"/api/v1/admin/users/{admin.id}/demote", headers=auth(owner))
    assert r.status_code == 200, r.text
    assert r.json()["user"]["role"] == "manager"

    # same token, role claim still says admin
    r = client.get("/api/v1/admin/users", headers=headers)
    assert r.status_code == 403


def test_only_owner_demotes_admins(client, make_user):
    a1 = make_user(Role.ADMIN.value)
    a2 = make_user(Role.ADMIN.value)
    r = client.post(f"/api/v1/admin/users/{a2.id}/demote", headers=auth(a1))
    assert r.status_code == 403
    assert r.json()["detail"] == "Only the owner can demote an admin"


def test_owner_is_untouchable(client, make_user, owner):
    admin = make_user(Role.ADMIN.value)
    r = client.post(f"/api/v1/admin/users/{owner.id}/demote", headers=auth(admin))
    assert r.status_code == 403
    assert r.json()["detail"] == "Cannot change the owner's role"


def test_user_cannot_reach_admin_routes(client, make_user):
    r = client.get("/api/v1/admin/users", headers=auth(make_user()))
    assert r.status_code == 403
    assert r.json()["detail"] == "Forbidden"
