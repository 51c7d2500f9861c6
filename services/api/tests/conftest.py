import uuid
from datetime import datetime, timezone

import fakeredis
import fakeredis.aioredis
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from recipebox.billing import BillingError, BillingSubscription
from recipebox.db import Base, get_db
from recipebox.deps import get_billing
from recipebox.infra import redis_client
from recipebox.main import app, limiter
from recipebox.models import Cookbook, Recipe, Tier, User
from recipebox.services.metadata import CATALOG, list_entries, seed_catalog

# --- Test Database Setup ---

SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool  # in-memory DB must be shared across sessions
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

limiter.enabled = False


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


class FakeBilling:
    """In-memory billing gateway recording every call."""

    def __init__(self):
        self.calls = []
        self.fail_on = set()
        self.subscriptions = {}
        self.period_end = datetime(2030, 1, 1, tzinfo=timezone.utc)

    def _call(self, name, *args):
        self.calls.append((name,) + args)
        if name in self.fail_on:
            raise BillingError(f"{name} failed", code="card_declined")

    def create_customer(self, *, email, name, payment_method_id):
        self._call("create_customer", email, payment_method_id)
        return f"cus_{uuid.uuid4().hex[:8]}"

    def update_customer(self, customer_id, *, payment_method_id):
        self._call("update_customer", customer_id, payment_method_id)

    def create_subscription(self, *, customer_id, price_id):
        self._call("create_subscription", customer_id, price_id)
        sub = BillingSubscription(
            subscription_id=f"sub_{uuid.uuid4().hex[:8]}",
            status="active",
            current_period_end=self.period_end,
            item_id=f"si_{uuid.uuid4().hex[:8]}",
        )
        self.subscriptions[sub.subscription_id] = sub
        return sub

    def retrieve_subscription(self, subscription_id):
        self._call("retrieve_subscription", subscription_id)
        return self.subscriptions[subscription_id]

    def update_subscription(self, subscription_id, *, item_id, price_id):
        self._call("update_subscription", subscription_id, item_id, price_id)
        return self.subscriptions[subscription_id]

    def cancel_subscription(self, subscription_id):
        self._call("cancel_subscription", subscription_id)
        sub = self.subscriptions.get(subscription_id)
        if sub is None:
            raise BillingError("No such subscription", code="resource_missing")
        self.subscriptions[subscription_id] = BillingSubscription(subscription_id, "canceled")
        return self.subscriptions[subscription_id]


@pytest.fixture(autouse=True)
def setup_database():
    """Create tables before each test, drop after."""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def billing():
    return FakeBilling()


@pytest.fixture
def client(billing):
    """Test client with DB and billing overrides."""
    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_billing] = lambda: billing
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def db_session():
    """Direct database session for setup."""
    session = TestingSessionLocal()
    yield session
    session.close()


@pytest.fixture(autouse=True)
def price_ids(monkeypatch):
    from recipebox.settings import settings
    monkeypatch.setattr(settings, "stripe_price_tier1", "price_tier1")
    monkeypatch.setattr(settings, "stripe_price_tier2", "price_tier2")


@pytest.fixture
def make_user(db_session):
    def _make(tier=Tier.FREE, admin_override=False, name="Cook"):
        user = User(
            name=name,
            email=f"{uuid.uuid4().hex[:10]}@example.com",
            subscription_tier=int(tier),
            admin_override=admin_override,
        )
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user
    return _make


@pytest.fixture
def free_user(make_user):
    return make_user(Tier.FREE, name="Free")


@pytest.fixture
def tier1_user(make_user):
    return make_user(Tier.TIER1, name="Enthusiast")


@pytest.fixture
def tier2_user(make_user):
    return make_user(Tier.TIER2, name="Professional")


@pytest.fixture
def admin_user(make_user):
    return make_user(Tier.ADMIN, name="Admin")


@pytest.fixture
def make_recipe(db_session):
    def _make(owner, name="Pancakes", is_private=None, **fields):
        recipe = Recipe(
            user_id=owner.id,
            name=name,
            ingredients=fields.pop("ingredients", "flour\nmilk\neggs"),
            instructions=fields.pop("instructions", "Mix and fry."),
            is_private=is_private,
            **fields,
        )
        db_session.add(recipe)
        db_session.commit()
        db_session.refresh(recipe)
        return recipe
    return _make


@pytest.fixture
def make_cookbook(db_session):
    def _make(owner, name="Breakfasts", is_private=None, recipe_refs=None):
        cookbook = Cookbook(
            user_id=owner.id,
            name=name,
            is_private=is_private,
            recipe_refs=recipe_refs or [],
        )
        db_session.add(cookbook)
        db_session.commit()
        db_session.refresh(cookbook)
        return cookbook
    return _make


@pytest.fixture
def catalog(db_session):
    """Seeded metadata catalog as {kind: {name: row}}."""
    seed_catalog(db_session)
    return {
        kind: {row.name: row for row in list_entries(db_session, kind)}
        for kind in CATALOG
    }


@pytest.fixture(autouse=True)
def mock_redis():
    server = fakeredis.FakeServer()
    redis_client._redis_async = fakeredis.aioredis.FakeRedis(server=server, decode_responses=True)
    yield redis_client._redis_async
    redis_client._redis_async = None
