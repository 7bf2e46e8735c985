"""
Data models — SQLAlchemy declarative mappings for the order system schema.

Every relationship loads lazily. Finders that need related rows up front
ask for them explicitly (``joinedload`` / ``contains_eager``) in the
repositories.

Owned collections (``User -> Order`` and ``Order -> OrderItem``) are kept
private on the parent and exposed as read-only tuples. Use the parent's
``add_*`` / ``remove_*`` helpers to change them; the helpers keep the
child's back reference in step and orphan removal deletes whatever is
taken out.
"""

from contextlib import contextmanager
from enum import Enum
from typing import NamedTuple, Optional

from sqlalchemy import (
    BigInteger,
    Column,
    DateTime,
    Enum as SQLEnum,
    ForeignKey,
    Integer,
    Numeric,
    String,
    event,
    func,
)
from sqlalchemy.dialects import sqlite
from sqlalchemy.orm import declarative_base, object_session, relationship

Base = declarative_base()

# BIGINT ids, except on SQLite where only INTEGER PRIMARY KEY auto-increments.
IdType = BigInteger().with_variant(Integer(), "sqlite")

# SQLite keeps timestamps as text and compares them as strings. Bound values
# must use the same "YYYY-MM-DD HH:MM:SS" shape as CURRENT_TIMESTAMP.
Timestamp = DateTime().with_variant(sqlite.DATETIME(truncate_microseconds=True), "sqlite")


class OrderStatus(str, Enum):
    """
    Order lifecycle. Intended transitions are CREATED -> PAID,
    CREATED -> CANCELLED and PAID -> CANCELLED, but nothing checks them:
    the status is just a stored value.
    """

    CREATED = "CREATED"
    PAID = "PAID"
    CANCELLED = "CANCELLED"


def _fk(target: str) -> ForeignKey:
    return ForeignKey(target, ondelete="CASCADE", onupdate="CASCADE")


# --------------- Shared behaviour -----------------------------------------

@contextmanager
def _no_autoflush(entity):
    """Load a collection without flushing children that are not attached yet."""
    session = object_session(entity)
    if session is None:
        yield
        return
    with session.no_autoflush:
        yield


class _Entity:
    """Timestamps plus key-based equality for every mapped class."""

    __mapper_args__ = {"eager_defaults": True}

    created_at = Column(Timestamp, nullable=False, server_default=func.now())

    def _key(self) -> tuple:
        return (self.id,)

    def __eq__(self, other):
        if self is other:
            return True
        if type(other) is not type(self):
            return NotImplemented
        key = self._key()
        if None in key:
            # no key yet: only equal to itself
            return False
        return key == other._key()

    def __hash__(self):
        key = self._key()
        if None in key:
            return object.__hash__(self)
        return hash((type(self).__name__,) + key)


# --------------- Entities -------------------------------------------------

class User(_Entity, Base):
    __tablename__ = "users"

    id = Column(IdType, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False)
    email = Column(String(150), nullable=False, unique=True)

    _orders = relationship(
        "Order",
        back_populates="user",
        cascade="all, delete-orphan",
        order_by="Order.id",
    )

    def __init__(self, name: Optional[str] = None, email: Optional[str] = None, **kwargs):
        super().__init__(**kwargs)
        self.name = name
        self.email = email

    @property
    def orders(self) -> tuple:
        return tuple(self._orders)

    def add_order(self, order: "Order"):
        with _no_autoflush(self):
            if order not in self._orders:
                self._orders.append(order)

    def remove_order(self, order: "Order"):
        self._orders.remove(order)

    def __repr__(self):
        return (f"User(id={self.id}, name={self.name!r}, email={self.email!r}, "
                f"created_at={self.created_at})")


class Product(_Entity, Base):
    __tablename__ = "products"

    id = Column(IdType, primary_key=True, autoincrement=True)
    name = Column(String(120), nullable=False)
    price = Column(Numeric(10, 2), nullable=False)
    stock = Column(Integer, nullable=False, default=0, server_default="0")

    # Referenced, not owned: the database cascade removes dependent rows and
    # the ORM must never null out their (non-nullable) foreign keys.
    order_items = relationship("OrderItem", back_populates="product", passive_deletes="all")
    reviews = relationship("ProductReview", back_populates="product", passive_deletes="all")

    def __init__(self, name=None, price=None, stock=None, **kwargs):
        super().__init__(**kwargs)
        self.name = name
        self.price = price
        self.stock = 0 if stock is None else stock

    def __repr__(self):
        return (f"Product(id={self.id}, name={self.name!r}, price={self.price}, "
                f"stock={self.stock}, created_at={self.created_at})")


class Order(_Entity, Base):
    __tablename__ = "orders"

    id = Column(IdType, primary_key=True, autoincrement=True)
    total = Column(Numeric(10, 2), nullable=False)
    status = Column(
        SQLEnum(OrderStatus, native_enum=False, length=50),
        nullable=False,
        default=OrderStatus.CREATED,
        server_default=OrderStatus.CREATED.value,
    )
    user_id = Column(IdType, _fk("users.id"), nullable=False, index=True)

    user = relationship("User", back_populates="_orders")
    _items = relationship(
        "OrderItem",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderItem.id",
    )

    def __init__(self, total=None, user: Optional[User] = None,
                 status: OrderStatus = OrderStatus.CREATED, **kwargs):
        super().__init__(**kwargs)
        self.total = total
        self.status = status
        if user is not None:
            user.add_order(self)

    @property
    def items(self) -> tuple:
        return tuple(self._items)

    def add_item(self, item: "OrderItem"):
        """Attach *item* to this order. Do not set ``item.order`` directly."""
        with _no_autoflush(self):
            if item not in self._items:
                self._items.append(item)

    def remove_item(self, item: "OrderItem"):
        """Detach *item*; it is deleted from storage on the next flush."""
        self._items.remove(item)

    def __repr__(self):
        return (f"Order(id={self.id}, total={self.total}, status={self.status}, "
                f"created_at={self.created_at}, user_id={self.user_id})")


class OrderItem(_Entity, Base):
    __tablename__ = "order_items"

    id = Column(IdType, primary_key=True, autoincrement=True)
    quantity = Column(Integer, nullable=False)
    subtotal = Column(Numeric(10, 2), nullable=False)
    product_id = Column(IdType, _fk("products.id"), nullable=False, index=True)
    order_id = Column(IdType, _fk("orders.id"), nullable=False, index=True)

    product = relationship("Product", back_populates="order_items")
    order = relationship("Order", back_populates="_items")

    def __init__(self, quantity=None, product: Optional[Product] = None, subtotal=None, **kwargs):
        super().__init__(**kwargs)
        self.quantity = quantity
        self.subtotal = subtotal
        if product is not None:
            self.product = product

    def __repr__(self):
        return (f"OrderItem(id={self.id}, quantity={self.quantity}, subtotal={self.subtotal}, "
                f"product_id={self.product_id}, order_id={self.order_id})")


class ProductReviewId(NamedTuple):
    """Composite key of a review, in primary key column order."""

    user_id: Optional[int]
    product_id: Optional[int]


class ProductReview(_Entity, Base):
    """At most one review per (user, product): the pair is the primary key."""

    __tablename__ = "product_reviews"

    user_id = Column(IdType, _fk("users.id"), primary_key=True, autoincrement=False)
    product_id = Column(IdType, _fk("products.id"), primary_key=True,
                        autoincrement=False, index=True)
    rating = Column(Integer, nullable=False)
    comment = Column(String(500), nullable=True)

    user = relationship("User")
    product = relationship("Product", back_populates="reviews")

    def __init__(self, user: Optional[User] = None, product: Optional[Product] = None,
                 rating=None, comment=None, **kwargs):
        super().__init__(**kwargs)
        # key columns follow the related rows; flush fills them in when
        # the parents are still pending
        if user is not None:
            self.user = user
            self.user_id = user.id
        if product is not None:
            self.product = product
            self.product_id = product.id
        self.rating = rating
        self.comment = comment

    @property
    def id(self) -> ProductReviewId:
        return ProductReviewId(self.user_id, self.product_id)

    def _key(self) -> tuple:
        return tuple(self.id)

    def __repr__(self):
        return (f"ProductReview(id={tuple(self.id)}, rating={self.rating}, "
                f"comment={self.comment!r}, created_at={self.created_at})")


# --------------- created_at is assigned by the database -------------------

def _reject_created_at(target, value, oldvalue, initiator):
    raise AttributeError(
        f"{type(target).__name__}.created_at is assigned by the database and cannot be set"
    )


for _model in (User, Product, Order, OrderItem, ProductReview):
    event.listen(_model.created_at, "set", _reject_created_at)
