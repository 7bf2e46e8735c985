"""
Shared fixtures: a private in-memory database per test, a session on it,
small entity factories and an HTTP client wired to the same database.
"""

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from ordersystem.database import create_db_engine, execute, get_session, init_db, session_scope
from ordersystem.main import app
from ordersystem.models import Order, OrderItem, OrderStatus, Product, ProductReview, User
from ordersystem.seed import seed


@pytest.fixture
def engine():
    eng = create_db_engine("sqlite://", echo=False)
    init_db(eng)
    yield eng
    eng.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, expire_on_commit=False)


@pytest.fixture
def session(session_factory):
    s = session_factory()
    yield s
    s.rollback()
    s.close()


@pytest.fixture
def seeded(session):
    seed(session)
    session.flush()
    return session


@pytest.fixture
def client(session_factory):
    """TestClient without lifespan, so the module-level engine is never touched."""

    def override_session():
        s = session_factory()
        try:
            yield s
        finally:
            s.close()

    app.dependency_overrides[get_session] = override_session
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def seeded_client(client, session_factory):
    with session_scope(session_factory) as s:
        seed(s)
    return client


# --------------- Factories ------------------------------------------------

def make_user(session, name="Ana", email="ana@x.com"):
    user = User(name, email)
    session.add(user)
    session.flush()
    return user


def make_product(session, name="Mouse", price="50.00", stock=10):
    product = Product(name, Decimal(price), stock)
    session.add(product)
    session.flush()
    return product


def make_order(session, user, total="50.00", status=OrderStatus.CREATED, items=()):
    order = Order(Decimal(total), user, status)
    for product, quantity, subtotal in items:
        order.add_item(OrderItem(quantity, product, Decimal(subtotal)))
    session.add(order)
    session.flush()
    return order


def make_review(session, user, product, rating=5, comment=None):
    review = ProductReview(user, product, rating, comment)
    session.add(review)
    session.flush()
    return review


def set_created_at(session, table, value, **key):
    """created_at cannot be assigned through the ORM; rewrite it in SQL."""
    where = " AND ".join(f"{col} = :{col}" for col in key)
    execute(session, f"UPDATE {table} SET created_at = :value WHERE {where}",
            {"value": value, **key})
    session.expire_all()
