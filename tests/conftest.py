import os


def _set_test_env() -> None:
    defaults = {
        "APP_NAME": "EduMate Admin Test",
        "ENVIRONMENT": "test",
        "SECRET_KEY": "test-secret-key-with-enough-length-for-hs256",
        "ACCESS_TOKEN_EXPIRE_MINUTES": "30",
        "REFRESH_TOKEN_EXPIRE_DAYS": "7",
        "PASSWORD_BCRYPT_ROUNDS": "4",
        "AUTO_CREATE_TABLES": "false",
        "RATE_LIMIT_ENABLED": "false",
        "DATABASE_URL": "sqlite://",
        "PAYSTACK_SECRET_KEY": "sk_test_xxx",
        "PAYSTACK_WEBHOOK_SECRET": "whsec_test_xxx",
        "FRONTEND_BASE_URL": "https://edumategh.com",
        "EMAIL_PROVIDER": "console",
        "CONTACT_RECIPIENTS": "support@edumategh.com",
        "CORS_ORIGINS": "http://localhost:5173,http://localhost:3000",
        "BOOTSTRAP_ADMIN_EMAILS": "",
    }
    for key, value in defaults.items():
        os.environ.setdefault(key, value)


_set_test_env()

import json  # noqa: E402

import httpx  # noqa: E402
import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from edumate.core.database import Base, get_db  # noqa: E402
from edumate.core.security import create_access_token, hash_password  # noqa: E402
from edumate.dependencies import get_paystack_client  # noqa: E402
from edumate.main import app  # noqa: E402
from edumate.models import User, UserRole  # noqa: E402
from edumate.services.paystack import PaystackClient  # noqa: E402


class FakeGateway:
    """Stands in for api.paystack.co behind an httpx.MockTransport."""

    def __init__(self):
        self.calls: list[httpx.Request] = []
        self.verify_status = "success"
        self.verify_gateway_response = "Approved"
        self.initialize_response: tuple[int, dict] | None = None

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(request)
        path = request.url.path
        if path == "/transaction/initialize":
            if self.initialize_response is not None:
                status_code, body = self.initialize_response
                return httpx.Response(status_code, json=body)
            sent = json.loads(request.content)
            return httpx.Response(
                200,
                json={
                    "status": True,
                    "message": "Authorization URL created",
                    "data": {
                        "authorization_url": f"https://checkout.paystack.com/{sent['reference']}",
                        "access_code": "ac_test",
                        "reference": sent["reference"],
                    },
                },
            )
        if path.startswith("/transaction/verify/"):
            reference = path.rsplit("/", 1)[-1]
            return httpx.Response(
                200,
                json={
                    "status": True,
                    "message": "Verification successful",
                    "data": {
                        "reference": reference,
                        "status": self.verify_status,
                        "gateway_response": self.verify_gateway_response,
                        "amount": 10000,
                    },
                },
            )
        return httpx.Response(404, json={"status": False, "message": "Not found"})

    def client(self) -> PaystackClient:
        return PaystackClient(
            "sk_test_xxx",
            base_url="https://api.paystack.co",
            webhook_secret="whsec_test_xxx",
            transport=httpx.MockTransport(self),
        )


@pytest.fixture
def db_session():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def gateway():
    return FakeGateway()


@pytest.fixture
def client(db_session, gateway):
    app.dependency_overrides.clear()

    def _override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = _override_get_db
    app.dependency_overrides[get_paystack_client] = gateway.client
    try:
        with TestClient(app) as test_client:
            yield test_client
    finally:
        app.dependency_overrides.clear()


def make_user(db, email: str, role: UserRole = UserRole.ADMIN, password: str = "Secret123!", is_active: bool = True) -> User:
    user = User(
        email=email,
        full_name=email.split("@")[0].title(),
        hashed_password=hash_password(password),
        role=role,
        is_active=is_active,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def admin_user(db_session):
    return make_user(db_session, "admin@edumategh.com")


@pytest.fixture
def admin_headers(admin_user):
    token = create_access_token(admin_user.id, admin_user.role.value)
    return {"Authorization": f"Bearer {token}"}
