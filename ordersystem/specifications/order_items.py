"""Order item predicates."""

from ordersystem.models import Order, OrderItem
from ordersystem.specifications.base import Specification


def by_order(order_id):
    return Specification(lambda: None if order_id is None else OrderItem.order_id == order_id)


def by_product(product_id):
    return Specification(lambda: None if product_id is None else OrderItem.product_id == product_id)


def quantity_greater_than(quantity):
    return Specification(lambda: None if quantity is None else OrderItem.quantity > quantity)


def subtotal_greater_than(subtotal):
    return Specification(lambda: None if subtotal is None else OrderItem.subtotal > subtotal)


def by_user(user_id):
    """Items whose order belongs to *user_id*."""
    return Specification(
        lambda: None if user_id is None else OrderItem.order.has(Order.user_id == user_id)
    )
