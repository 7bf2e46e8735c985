"""
Runtime predicate builders, one module per entity.
"""

from ordersystem.specifications.base import Specification
from ordersystem.specifications import (
    order_items,
    orders,
    product_reviews,
    products,
    users,
)

__all__ = [
    "Specification",
    "order_items",
    "orders",
    "product_reviews",
    "products",
    "users",
]
