import warnings
from decimal import Decimal

import pytest
from sqlalchemy.exc import IntegrityError, SAWarning

from ordersystem.database import execute, query
from ordersystem.models import Order, OrderItem, Product, ProductReview, User
from ordersystem.repositories import ProductRepository, UserRepository
from tests.conftest import make_order, make_product, make_review, make_user


def count_rows(session, table):
    return query(session, f"SELECT COUNT(*) AS n FROM {table}", one=True)["n"]


def test_duplicate_email_is_rejected(session):
    make_user(session, email="dup@x.com")
    with pytest.raises(IntegrityError):
        make_user(session, name="Other", email="dup@x.com")
    session.rollback()


def test_duplicate_review_is_rejected(session):
    user = make_user(session)
    product = make_product(session)
    make_review(session, user, product, rating=5)
    session.expunge_all()

    user = session.get(User, user.id)
    product = session.get(Product, product.id)
    with pytest.raises(IntegrityError):
        make_review(session, user, product, rating=1)
    session.rollback()


def test_order_requires_existing_user(session):
    with pytest.raises(IntegrityError):
        execute(session, "INSERT INTO orders (total, status, user_id) VALUES (1, 'CREATED', 999)")
    session.rollback()


def test_example_scenario_ana_and_mouse(session):
    ana = make_user(session, "Ana", "ana@x.com")
    mouse = make_product(session, "Mouse", "50.00", 10)
    order = Order(Decimal("50.00"), ana)
    order.add_item(OrderItem(1, mouse, Decimal("50.00")))
    session.add(order)
    session.flush()

    assert count_rows(session, "orders") == 1
    rows = query(session, "SELECT order_id, product_id FROM order_items")
    assert rows == [{"order_id": order.id, "product_id": mouse.id}]

    UserRepository(session).delete(ana)
    assert count_rows(session, "orders") == 0
    assert count_rows(session, "order_items") == 0
    assert count_rows(session, "products") == 1


def test_deleting_user_removes_orders_items_and_reviews(session):
    ana = make_user(session)
    bob = make_user(session, "Bob", "bob@x.com")
    mouse = make_product(session)
    make_order(session, ana, items=[(mouse, 1, "50.00"), (mouse, 2, "100.00")])
    make_order(session, bob, items=[(mouse, 1, "50.00")])
    make_review(session, ana, mouse, 4)
    make_review(session, bob, mouse, 5)

    UserRepository(session).delete(ana)

    assert count_rows(session, "orders") == 1
    assert count_rows(session, "order_items") == 1
    assert query(session, "SELECT user_id FROM product_reviews") == [{"user_id": bob.id}]


def test_deleting_product_removes_items_and_reviews(session):
    ana = make_user(session)
    mouse = make_product(session)
    cable = make_product(session, "Cable", "10.00", 5)
    order = make_order(session, ana, items=[(mouse, 1, "50.00"), (cable, 1, "10.00")])
    make_review(session, ana, mouse, 3)
    order_id = order.id
    session.expunge_all()

    ProductRepository(session).delete_by_id(mouse.id)

    assert count_rows(session, "products") == 1
    assert query(session, "SELECT product_id FROM order_items") == [{"product_id": cable.id}]
    assert count_rows(session, "product_reviews") == 0
    assert count_rows(session, "orders") == 1
    assert session.get(Order, order_id) is not None


def test_removed_item_is_deleted_on_flush(session):
    ana = make_user(session)
    mouse = make_product(session)
    order = make_order(session, ana, items=[(mouse, 1, "50.00"), (mouse, 3, "150.00")])
    first = order.items[0]

    order.remove_item(first)
    session.flush()

    assert first.order is None
    assert len(order.items) == 1
    assert count_rows(session, "order_items") == 1


def test_removed_order_is_deleted_on_flush(session):
    ana = make_user(session)
    order = make_order(session, ana)
    ana.remove_order(order)
    session.flush()
    assert count_rows(session, "orders") == 0


def test_review_reaches_user_and_product_lazily(session):
    ana = make_user(session)
    mouse = make_product(session)
    make_review(session, ana, mouse, 5, "good")
    session.expunge_all()

    review = session.get(ProductReview, (ana.id, mouse.id))
    assert review.user.email == "ana@x.com"
    assert review.product.name == "Mouse"
    assert [r.rating for r in review.product.reviews] == [5]


def test_add_item_to_loaded_order_flushes_cleanly(session):
    user = make_user(session)
    keyboard = make_product(session, "Keyboard")
    mouse = make_product(session)
    order = make_order(session, user, items=[(keyboard, 1, "50.00")])
    order_id, mouse_id = order.id, mouse.id
    session.expunge_all()

    order = session.get(Order, order_id)
    mouse = session.get(Product, mouse_id)
    with warnings.catch_warnings():
        warnings.simplefilter("error", SAWarning)
        item = OrderItem(1, mouse, Decimal("50.00"))
        order.add_item(item)
        session.flush()

    assert item.order_id == order_id
    assert [i.product_id for i in order.items] == [keyboard.id, mouse_id]


def test_new_order_for_loaded_user_flushes_cleanly(session):
    user_id = make_order(session, make_user(session)).user_id
    session.expunge_all()

    user = session.get(User, user_id)
    with warnings.catch_warnings():
        warnings.simplefilter("error", SAWarning)
        order = Order(Decimal("10.00"), user)
        session.flush()

    assert order.id is not None
    assert len(user.orders) == 2
