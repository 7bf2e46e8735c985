"""
Request / response models for the HTTP API.

Inputs are not range-checked: ratings, prices, totals and subtotals are
stored as given.
"""

from datetime import datetime
from decimal import Decimal
from typing import Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict

from ordersystem.models import OrderStatus

T = TypeVar("T")


class ORMModel(BaseModel):
    model_config = ConfigDict(from_attributes=True)


class Page(BaseModel, Generic[T]):
    items: List[T]
    page: int
    per_page: int
    total: int
    pages: int


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------

class UserCreate(BaseModel):
    name: str
    email: str


class UserOut(ORMModel):
    id: int
    name: str
    email: str
    created_at: datetime


# ---------------------------------------------------------------------------
# Products
# ---------------------------------------------------------------------------

class ProductCreate(BaseModel):
    name: str
    price: Decimal
    stock: int = 0


class ProductUpdate(BaseModel):
    name: Optional[str] = None
    price: Optional[Decimal] = None
    stock: Optional[int] = None


class ProductOut(ORMModel):
    id: int
    name: str
    price: Decimal
    stock: int
    created_at: datetime


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------

class OrderCreate(BaseModel):
    user_id: int
    total: Decimal
    status: OrderStatus = OrderStatus.CREATED


class StatusUpdate(BaseModel):
    status: OrderStatus


class OrderItemCreate(BaseModel):
    product_id: int
    quantity: int
    subtotal: Decimal


class OrderItemOut(ORMModel):
    id: int
    quantity: int
    subtotal: Decimal
    product_id: int
    order_id: int
    created_at: datetime


class OrderOut(ORMModel):
    id: int
    total: Decimal
    status: OrderStatus
    user_id: int
    created_at: datetime


class OrderDetail(OrderOut):
    items: List[OrderItemOut]


# ---------------------------------------------------------------------------
# Reviews
# ---------------------------------------------------------------------------

class ReviewCreate(BaseModel):
    user_id: int
    product_id: int
    rating: int
    comment: Optional[str] = None


class ReviewOut(ORMModel):
    user_id: int
    product_id: int
    rating: int
    comment: Optional[str] = None
    created_at: datetime


# ---------------------------------------------------------------------------
# Reports
# ---------------------------------------------------------------------------

class StatusCountOut(BaseModel):
    status: OrderStatus
    count: int


class ProductQuantityOut(BaseModel):
    product_id: int
    name: str
    total_quantity: int


class ProductRevenueOut(BaseModel):
    product_id: int
    name: str
    revenue: Decimal


class UserSalesOut(BaseModel):
    user_id: int
    name: str
    total_sales: Decimal


class ProductRatingOut(BaseModel):
    product_id: int
    name: str
    average_rating: float
    review_count: int


class ReviewStatsOut(BaseModel):
    count: int
    average: Optional[float] = None
    minimum: Optional[int] = None
    maximum: Optional[int] = None


class InventoryValueOut(BaseModel):
    inventory_value: Decimal
