"""Pytest configuration and fixtures"""
import os

import pytest
from fastapi.testclient import TestClient

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from app.api import create_app  # noqa: E402
from app.data.database import init_db, make_engine, make_session_factory  # noqa: E402
from app.data.models import CartModel, ProductModel  # noqa: E402


@pytest.fixture
def engine():
    """Fresh in-memory database per test"""
    engine = make_engine("sqlite://")
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return make_session_factory(engine)


@pytest.fixture
def db_session(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def app(engine):
    return create_app(engine, cart_write_attempts=3, seed_on_startup=False)


@pytest.fixture
def test_client(app):
    with TestClient(app) as client:
        yield client


@pytest.fixture
def seeded_products(test_client):
    """Seed the catalog and return products keyed by name"""
    response = test_client.post("/api/seed-products")
    assert response.status_code == 200
    products = test_client.get("/api/products").json()
    return {p["name"]: p for p in products}


@pytest.fixture
def count_carts(session_factory):
    def _count(user_id=None):
        with session_factory() as session:
            query = session.query(CartModel)
            if user_id is not None:
                query = query.filter(CartModel.user_id == user_id)
            return query.count()

    return _count


@pytest.fixture
def sample_product(db_session):
    product = ProductModel(name="facewash", price=2499.99, image=["../images/facewash1.jpg"])
    db_session.add(product)
    db_session.commit()
    return product
