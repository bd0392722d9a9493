from contextlib import contextmanager
from types import SimpleNamespace

from fastapi.testclient import TestClient

from conftest import make_user
from edumate.api.v1.endpoints.auth import NOT_ADMIN_MESSAGE
from edumate.core.database import get_db
from edumate.core.security import create_access_token, create_refresh_token, decode_token, hash_password, verify_password
from edumate.main import app
from edumate.models import UserRole


class _StubQuery:
    def __init__(self, result):
        self._result = result

    def filter(self, *args, **kwargs):
        return self

    def first(self):
        return self._result


class _StubSession:
    def __init__(self, user):
        self._user = user

    def query(self, *args, **kwargs):
        return _StubQuery(self._user)


@contextmanager
def _client_with_user(user):
    app.dependency_overrides.clear()

    def _override_get_db():
        yield _StubSession(user)

    app.dependency_overrides[get_db] = _override_get_db
    try:
        with TestClient(app) as client:
            yield client
    finally:
        app.dependency_overrides.clear()


def _admin(**kwargs):
    values = {"id": "a1", "email": "admin@edumategh.com", "full_name": "Admin", "is_active": True, "role": UserRole.ADMIN}
    values.update(kwargs)
    return SimpleNamespace(**values)


def test_password_hash_roundtrip():
    hashed = hash_password("Secret123!")
    assert hashed != "Secret123!"
    assert verify_password("Secret123!", hashed)
    assert not verify_password("wrong", hashed)
    assert not verify_password("Secret123!", "not-a-bcrypt-hash")


def test_refresh_rejects_access_token():
    access = create_access_token("a1", "admin")
    with _client_with_user(_admin()) as client:
        res = client.post("/api/v1/auth/refresh", json={"refresh_token": access})

    assert res.status_code == 401
    assert res.json()["detail"] == "Invalid refresh token"


def test_refresh_rejects_invalid_token():
    with _client_with_user(_admin()) as client:
        res = client.post("/api/v1/auth/refresh", json={"refresh_token": "not-a-jwt"})

    assert res.status_code == 401
    assert res.json()["detail"] == "Invalid refresh token"


def test_refresh_rejects_inactive_user():
    refresh = create_refresh_token("a1", "admin")
    with _client_with_user(_admin(is_active=False)) as client:
        res = client.post("/api/v1/auth/refresh", json={"refresh_token": refresh})

    assert res.status_code == 401
    assert res.json()["detail"] == "User not found or inactive"


def test_refresh_rejects_demoted_admin():
    refresh = create_refresh_token("a1", "admin")
    with _client_with_user(_admin(role=UserRole.STUDENT)) as client:
        res = client.post("/api/v1/auth/refresh", json={"refresh_token": refresh})

    assert res.status_code == 403
    assert res.json()["detail"] == NOT_ADMIN_MESSAGE


def test_refresh_success_returns_new_pair():
    refresh = create_refresh_token("a1", "admin")
    with _client_with_user(_admin()) as client:
        res = client.post("/api/v1/auth/refresh", json={"refresh_token": refresh})
    assert res.status_code == 200

    body = res.json()
    assert body["token_type"] == "bearer"

    decoded_access = decode_token(body["access_token"])
    assert decoded_access["type"] == "access"
    assert decoded_access["sub"] == "a1"
    assert decoded_access["role"] == "admin"

    decoded_refresh = decode_token(body["refresh_token"])
    assert decoded_refresh["type"] == "refresh"


def test_admin_route_requires_token():
    with _client_with_user(_admin()) as client:
        res = client.get("/api/v1/auth/me")
    assert res.status_code == 401
    assert res.json()["detail"] == "Not authenticated"


def test_admin_route_rejects_refresh_token_as_bearer():
    refresh = create_refresh_token("a1", "admin")
    with _client_with_user(_admin()) as client:
        res = client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {refresh}"})
    assert res.status_code == 401
    assert res.json()["detail"] == "Invalid token"


def test_role_is_reread_from_database():
    # The token still claims admin, but the stored user has been demoted.
    access = create_access_token("a1", "admin")
    with _client_with_user(_admin(role=UserRole.TEACHER)) as client:
        res = client.get("/api/v1/curricula", headers={"Authorization": f"Bearer {access}"})
    assert res.status_code == 403
    assert res.json()["detail"] == "Admin access required"


def test_login_admin_then_me(client, db_session):
    make_user(db_session, "admin@edumategh.com", password="Secret123!")

    res = client.post("/api/v1/auth/login", json={"email": "Admin@edumategh.com", "password": "Secret123!"})
    assert res.status_code == 200
    token = res.json()["access_token"]

    res = client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert res.status_code == 200
    assert res.json()["email"] == "admin@edumategh.com"
    assert res.json()["role"] == "admin"

    res = client.post("/api/v1/auth/logout", headers={"Authorization": f"Bearer {token}"})
    assert res.json() == {"message": "Logged out"}


def test_login_wrong_password(client, db_session):
    make_user(db_session, "admin@edumategh.com", password="Secret123!")
    res = client.post("/api/v1/auth/login", json={"email": "admin@edumategh.com", "password": "nope"})
    assert res.status_code == 401
    assert res.json()["detail"] == "Invalid credentials"


def test_login_unknown_email(client):
    res = client.post("/api/v1/auth/login", json={"email": "ghost@edumategh.com", "password": "whatever"})
    assert res.status_code == 401


def test_login_non_admin_is_refused(client, db_session):
    make_user(db_session, "student@edumategh.com", role=UserRole.STUDENT, password="Secret123!")
    res = client.post("/api/v1/auth/login", json={"email": "student@edumategh.com", "password": "Secret123!"})
    assert res.status_code == 403
    assert res.json()["detail"] == NOT_ADMIN_MESSAGE


def test_login_inactive_admin_is_refused(client, db_session):
    make_user(db_session, "old@edumategh.com", password="Secret123!", is_active=False)
    res = client.post("/api/v1/auth/login", json={"email": "old@edumategh.com", "password": "Secret123!"})
    assert res.status_code == 403
    assert res.json()["detail"] == "User is inactive"


def test_login_rejects_overlong_password(client):
    res = client.post("/api/v1/auth/login", json={"email": "admin@edumategh.com", "password": "x" * 80})
    assert res.status_code == 422


def test_create_admin_script_promotes_and_sets_password(client, db_session):
    from scripts.create_admin import upsert_admin

    make_user(db_session, "teacher@edumategh.com", role=UserRole.TEACHER, password="old-password", is_active=False)
    user = upsert_admin(db_session, " Teacher@EduMateGH.com ", "N3w-password!")
    assert user.role == UserRole.ADMIN
    assert user.is_active

    res = client.post("/api/v1/auth/login", json={"email": "teacher@edumategh.com", "password": "N3w-password!"})
    assert res.status_code == 200

    created = upsert_admin(db_session, "fresh@edumategh.com", "Secret123!", full_name="Fresh Admin")
    assert created.full_name == "Fresh Admin"
    assert verify_password("Secret123!", created.hashed_password)
