"""
Row shapes returned by the aggregate queries.
"""

from decimal import Decimal
from typing import NamedTuple, Optional

from ordersystem.models import OrderStatus


class PriceStatistics(NamedTuple):
    average: Optional[Decimal]
    minimum: Optional[Decimal]
    maximum: Optional[Decimal]
    count: int


class SalesStatistics(NamedTuple):
    count: int
    total: Optional[Decimal]
    average: Optional[Decimal]
    minimum: Optional[Decimal]
    maximum: Optional[Decimal]


class ReviewStatistics(NamedTuple):
    count: int
    average: Optional[float]
    minimum: Optional[int]
    maximum: Optional[int]


class StatusCount(NamedTuple):
    status: OrderStatus
    count: int


class UserSales(NamedTuple):
    user_id: int
    name: str
    total_sales: Decimal


class ProductQuantity(NamedTuple):
    product_id: int
    name: str
    total_quantity: int


class ProductRevenue(NamedTuple):
    product_id: int
    name: str
    revenue: Decimal


class ProductRating(NamedTuple):
    product_id: int
    name: str
    average_rating: float
    review_count: int
