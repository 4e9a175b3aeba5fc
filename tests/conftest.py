import os

# must be set before foodorder is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET"] = "test_secret"
os.environ["ENVIRONMENT"] = "test"

from contextlib import contextmanager

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from foodorder.api.deps import (
    get_catalog_client,
    get_lock_service,
    get_notification_service,
    get_payment_gateway,
)
from foodorder.data import models  # noqa: F401
from foodorder.data.database import Base, get_db
from foodorder.data.models.user import UserModel
from foodorder.domain.errors import ConcurrencyConflict, GatewayError, WebhookSignatureError
from foodorder.main import create_app
from foodorder.services.payment_gateway import CheckoutSession
from foodorder.services.token_service import create_access_token

USER_ID = "user123"
OTHER_USER_ID = "user456"


class FakeLockService:
    """In-process stand-in for the Redis cart lock."""

    def __init__(self):
        self.locked_users = []
        self.busy_users = set()

    @contextmanager
    def cart_lock(self, user_id):
        if user_id in self.busy_users:
            raise ConcurrencyConflict("Cart is being modified by another request")
        self.locked_users.append(user_id)
        yield


class FakeGateway:
    def __init__(self):
        self.sessions = []
        self.fail = False

    def create_checkout_session(self, line_items, success_url, cancel_url, metadata=None):
        if self.fail:
            raise GatewayError("Payment gateway error: card network down")
        self.sessions.append(
            {
                "line_items": line_items,
                "success_url": success_url,
                "cancel_url": cancel_url,
                "metadata": metadata,
            }
        )
        return CheckoutSession(id=f"cs_test_{len(self.sessions)}", url="http://checkout.stripe.com/session")

    def parse_webhook(self, payload, signature):
        import json

        if signature != "valid":
            raise WebhookSignatureError("Invalid webhook signature")
        return json.loads(payload)


class FakeCatalog:
    def __init__(self, foods=None):
        self.foods = foods or {}

    def fetch_food(self, item_id):
        return self.foods.get(item_id)


class FakeNotifier:
    def __init__(self):
        self.sent = []

    def send_payment_notification(self, user_id, order_id):
        self.sent.append((user_id, order_id))


@pytest.fixture()
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


@pytest.fixture()
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def user(db):
    user = UserModel(id=USER_ID, name="Test User", email="user123@example.com", cart_data={})
    db.add(user)
    db.add(UserModel(id=OTHER_USER_ID, name="Other User", email="user456@example.com", cart_data={}))
    db.commit()
    return user


@pytest.fixture()
def lock_service():
    return FakeLockService()


@pytest.fixture()
def gateway():
    return FakeGateway()


@pytest.fixture()
def notifier():
    return FakeNotifier()


@pytest.fixture()
def catalog():
    return None


@pytest.fixture()
def token():
    return create_access_token(USER_ID)


@pytest.fixture()
def auth_headers(token):
    return {"token": token}


@pytest.fixture()
def client(session_factory, user, lock_service, gateway, notifier, catalog):
    app = create_app()

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_lock_service] = lambda: lock_service
    app.dependency_overrides[get_payment_gateway] = lambda: gateway
    app.dependency_overrides[get_notification_service] = lambda: notifier
    app.dependency_overrides[get_catalog_client] = lambda: catalog

    return TestClient(app)
