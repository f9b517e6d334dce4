import uuid

from symptom_intake.auth import deps
from symptom_intake.auth.jwt import create_refresh_token, decode_token

from .conftest import make_user


def _email():
    return f"{uuid.uuid4().hex[:10]}@example.com"


def test_register_returns_tokens(client):
    r = client.post("/api/auth/register", json={"email": _email(), "password": "secret123", "name": "Sam"})
    assert r.status_code == 201, r.text
    j = r.json()
    assert j["token_type"] == "bearer"
    assert decode_token(j["access_token"])["type"] == "access"
    assert decode_token(j["refresh_token"])["type"] == "refresh"


def test_register_duplicate_email(client):
    email = _email()
    assert client.post("/api/auth/register", json={"email": email, "password": "secret123"}).status_code == 201
    r = client.post("/api/auth/register", json={"email": email, "password": "secret123"})
    assert r.status_code == 409
    assert r.json()["code"] == "CONFLICT"


def test_register_short_password(client):
    r = client.post("/api/auth/register", json={"email": _email(), "password": "123"})
    assert r.status_code == 422


def test_login_and_me(client):
    user = make_user(password="hunter22")
    r = client.post("/api/auth/login", json={"email": user.email, "password": "hunter22"})
    assert r.status_code == 200, r.text
    token = r.json()["access_token"]

    me = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert me.status_code == 200
    assert me.json()["email"] == user.email
    assert me.json()["id"] == user.id


def test_login_with_username_field(client):
    user = make_user(password="hunter22")
    r = client.post("/api/auth/login", json={"username": user.email, "password": "hunter22"})
    assert r.status_code == 200


def test_login_wrong_password(client):
    user = make_user(password="hunter22")
    r = client.post("/api/auth/login", json={"email": user.email, "password": "wrong-one"})
    assert r.status_code == 401
    assert r.json()["message"] == "Invalid credentials"


def test_login_requires_identifier(client):
    r = client.post("/api/auth/login", json={"password": "hunter22"})
    assert r.status_code == 422


def test_refresh_issues_new_access_token(client, user):
    refresh = create_refresh_token({"sub": user.id})
    r = client.post("/api/auth/refresh", json={"refresh_token": refresh})
    assert r.status_code == 200
    access = r.json()["access_token"]
    assert client.get("/api/auth/me", headers={"Authorization": f"Bearer {access}"}).status_code == 200


def test_refresh_rejects_access_token(client, user, auth_headers):
    access = auth_headers["Authorization"].split(" ", 1)[1]
    r = client.post("/api/auth/refresh", json={"refresh_token": access})
    assert r.status_code == 401
    assert r.json()["message"] == "Invalid refresh token"


def test_refresh_token_is_not_an_access_token(client, user):
    refresh = create_refresh_token({"sub": user.id})
    r = client.get("/api/auth/me", headers={"Authorization": f"Bearer {refresh}"})
    assert r.status_code == 401


def test_refresh_for_unknown_user(client):
    refresh = create_refresh_token({"sub": str(uuid.uuid4())})
    r = client.post("/api/auth/refresh", json={"refresh_token": refresh})
    assert r.status_code == 401
    assert r.json()["message"] == "User not found"


def test_deps_exposes_only_dependencies():
    for name in ("hash_password", "verify_password", "create_access_token"):
        assert not hasattr(deps, name)
    assert callable(deps.get_current_user) and callable(deps.get_optional_user)
