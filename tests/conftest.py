import hashlib
import hmac
import os
import time
from decimal import Decimal

# must be set before storefront.utils.settings is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["AUTH_SECRET"] = "test-secret"
os.environ["STRIPE_SECRET_KEY"] = "sk_test_dummy"
os.environ["STRIPE_WEBHOOK_SECRET"] = "whsec_test_secret"

import pytest
import redis
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from storefront.api import create_app, deps
from storefront.data.database import Base, get_db
from storefront.data.models import (
    UserModel,
    CategoryModel,
    ProductModel,
    OrderModel,
    OrderItemModel,
)
from storefront.services.payment_client import PaymentClient
from storefront.utils.security import hash_password, create_access_token

WEBHOOK_SECRET = "whsec_test_secret"


class FakeNotifier:
    def __init__(self):
        self.password_resets = []
        self.order_confirmations = []

    def send_password_reset(self, email, new_password):
        self.password_resets.append((email, new_password))

    def send_order_confirmation(self, email, order_id):
        self.order_confirmations.append((email, order_id))


class FakeLedger:
    def __init__(self, fail=False):
        self.claimed = set()
        self.fail = fail

    def claim(self, event_id):
        if self.fail:
            raise redis.ConnectionError("redis down")
        if event_id in self.claimed:
            return False
        self.claimed.add(event_id)
        return True


class FakePaymentClient(PaymentClient):
    """Real webhook signature checks, canned checkout sessions."""

    def __init__(self):
        super().__init__(api_key="sk_test_dummy", webhook_secret=WEBHOOK_SECRET)
        self.created = []
        self.sessions = {}
        self.error = None

    def create_checkout_session(self, line_items, customer_email, metadata, success_url, cancel_url):
        if self.error:
            raise self.error
        session_id = f"cs_test_{len(self.created) + 1}"
        self.created.append(
            {
                "id": session_id,
                "line_items": line_items,
                "customer_email": customer_email,
                "metadata": metadata,
                "success_url": success_url,
                "cancel_url": cancel_url,
            }
        )
        return {"id": session_id, "url": f"https://checkout.stripe.test/{session_id}"}

    def retrieve_checkout_session(self, session_id):
        if self.error:
            raise self.error
        return self.sessions[session_id]


class FakeGitHubClient:
    def __init__(self, profile=None, error=None):
        self.profile = profile or {"name": "Octo Cat", "email": "octo@example.com"}
        self.error = error

    def authorize_url(self, redirect_uri):
        return f"https://github.com/login/oauth/authorize?redirect_uri={redirect_uri}"

    def exchange_code(self, code):
        if self.error:
            raise self.error
        return "gho_token"

    def fetch_profile(self, access_token):
        return self.profile


@pytest.fixture
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


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, autocommit=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def notifier():
    return FakeNotifier()


@pytest.fixture
def ledger():
    return FakeLedger()


@pytest.fixture
def payment_client():
    return FakePaymentClient()


@pytest.fixture
def github_client():
    return FakeGitHubClient()


@pytest.fixture
def app(session_factory, notifier, ledger, payment_client, github_client):
    app = create_app()

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[deps.get_notifier] = lambda: notifier
    app.dependency_overrides[deps.get_event_ledger] = lambda: ledger
    app.dependency_overrides[deps.get_payment_client] = lambda: payment_client
    app.dependency_overrides[deps.get_github_client] = lambda: github_client
    return app


@pytest.fixture
def client(app):
    return TestClient(app)


# ---------- data helpers ----------

@pytest.fixture
def make_user(db):
    counter = {"n": 0}

    def _make(role="user", email=None, name=None, password="secret123"):
        counter["n"] += 1
        user = UserModel(
            name=name or f"User {counter['n']}",
            email=email or f"user{counter['n']}@example.com",
            password=hash_password(password),
            role=role,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make


@pytest.fixture
def admin(make_user):
    return make_user(role="admin", email="admin@example.com", name="Admin")


@pytest.fixture
def customer(make_user):
    return make_user(email="alice@example.com", name="Alice")


def auth_headers(user):
    return {"Authorization": f"Bearer {create_access_token(user.id)}"}


@pytest.fixture
def catalog(db):
    clothing = CategoryModel(name="Clothing")
    electronics = CategoryModel(name="Electronics")
    db.add_all([clothing, electronics])
    db.flush()

    shirt = ProductModel(
        name="Classic Cotton T-Shirt",
        description="Cotton tee",
        price=Decimal("29.99"),
        image_url="https://img.example.com/shirt.jpg",
        category_id=clothing.id,
    )
    phone = ProductModel(
        name="Smartphone",
        description="Fast phone",
        price=Decimal("699.99"),
        image_url="/placeholder.jpg",
        category_id=electronics.id,
    )
    db.add_all([shirt, phone])
    db.commit()
    return {"clothing": clothing, "electronics": electronics, "shirt": shirt, "phone": phone}


@pytest.fixture
def make_order(db):
    def _make(user, lines, status="pending", payment_status="PENDING", payment_intent_id=None):
        total = sum((p.price * q for p, q in lines), Decimal("0.00"))
        order = OrderModel(
            user_id=user.id,
            total=total,
            status=status,
            payment_status=payment_status,
            payment_method="credit_card",
            payment_intent_id=payment_intent_id,
            shipping_address="1 Main St",
            items=[OrderItemModel(product_id=p.id, quantity=q, price=p.price) for p, q in lines],
        )
        db.add(order)
        db.commit()
        db.refresh(order)
        return order

    return _make


def sign_payload(payload: str, secret: str = WEBHOOK_SECRET, timestamp: int | None = None) -> str:
    ts = timestamp or int(time.time())
    signature = hmac.new(secret.encode("utf-8"), f"{ts}.{payload}".encode("utf-8"), hashlib.sha256).hexdigest()
    return f"t={ts},v1={signature}"
