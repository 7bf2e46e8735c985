"""
Data access layer — one repository per entity.
"""

from ordersystem.repositories.base import Repository
from ordersystem.repositories.order_items import OrderItemRepository
from ordersystem.repositories.orders import OrderRepository
from ordersystem.repositories.product_reviews import ProductReviewRepository
from ordersystem.repositories.products import ProductRepository
from ordersystem.repositories.users import UserRepository

__all__ = [
    "OrderItemRepository",
    "OrderRepository",
    "ProductRepository",
    "ProductReviewRepository",
    "Repository",
    "UserRepository",
]
