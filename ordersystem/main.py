"""
Order System — HTTP API.
FastAPI server exposing CRUD and reporting endpoints over the repositories.
No business rules live here: totals, subtotals and status changes are
stored exactly as the caller sends them.
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from fastapi import Depends, FastAPI, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ordersystem.config import API_TITLE, API_VERSION, MIGRATE_ON_STARTUP, configure_logging
from ordersystem.database import get_session, migrate
from ordersystem.models import Order, OrderItem, OrderStatus, Product, ProductReview, User
from ordersystem.repositories import (
    OrderItemRepository,
    OrderRepository,
    ProductRepository,
    ProductReviewRepository,
    UserRepository,
)
from ordersystem.schemas import (
    InventoryValueOut,
    OrderCreate,
    OrderDetail,
    OrderItemCreate,
    OrderItemOut,
    OrderOut,
    Page,
    ProductCreate,
    ProductOut,
    ProductQuantityOut,
    ProductRatingOut,
    ProductRevenueOut,
    ProductUpdate,
    ReviewCreate,
    ReviewOut,
    ReviewStatsOut,
    StatusCountOut,
    StatusUpdate,
    UserCreate,
    UserOut,
    UserSalesOut,
)
from ordersystem.specifications import orders as order_specs
from ordersystem.specifications import product_reviews as review_specs
from ordersystem.specifications import products as product_specs
from ordersystem.specifications import users as user_specs

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI):
    configure_logging()
    if MIGRATE_ON_STARTUP:
        migrate()
    yield


# ---------------------------------------------------------------------------
# App setup
# ---------------------------------------------------------------------------

app = FastAPI(title=API_TITLE, version=API_VERSION, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(IntegrityError)
async def integrity_error_handler(request: Request, exc: IntegrityError):
    # constraint violations raised by the database
    logger.warning("Integrity error on %s %s: %s", request.method, request.url.path, exc.orig)
    return JSONResponse(status_code=409, content={"detail": str(exc.orig)})


def _get_or_404(repo, id_, label: str):
    entity = repo.find_by_id(id_)
    if entity is None:
        raise HTTPException(404, f"{label} not found")
    return entity


def _page(result: dict, schema) -> dict:
    return {**result, "items": [schema.model_validate(e) for e in result["items"]]}


@app.get("/")
def read_root():
    return {"message": f"{API_TITLE} is running", "version": API_VERSION}


# ---------------------------------------------------------------------------
# Endpoints — Users
# ---------------------------------------------------------------------------

@app.post("/users", response_model=UserOut, status_code=201)
def create_user(payload: UserCreate, session: Session = Depends(get_session)):
    user = UserRepository(session).save(User(payload.name, payload.email))
    session.commit()
    return UserOut.model_validate(user)


@app.get("/users", response_model=Page[UserOut])
def list_users(
    name: Optional[str] = None,
    email: Optional[str] = None,
    created_after: Optional[datetime] = None,
    created_before: Optional[datetime] = None,
    with_orders: bool = False,
    page: int = Query(1, ge=1),
    per_page: int = Query(20, ge=1, le=100),
    session: Session = Depends(get_session),
):
    spec = (
        user_specs.name_contains(name)
        & user_specs.has_email(email)
        & user_specs.created_after(created_after)
        & user_specs.created_before(created_before)
    )
    if with_orders:
        spec = spec & user_specs.has_orders()
    result = UserRepository(session).find_page(spec, page=page, per_page=per_page)
    return _page(result, UserOut)


@app.get("/users/{user_id}", response_model=UserOut)
def get_user(user_id: int, session: Session = Depends(get_session)):
    return UserOut.model_validate(_get_or_404(UserRepository(session), user_id, "User"))


@app.get("/users/{user_id}/orders", response_model=List[OrderOut])
def get_user_orders(user_id: int, session: Session = Depends(get_session)):
    user = _get_or_404(UserRepository(session), user_id, "User")
    return [OrderOut.model_validate(o) for o in user.orders]


@app.delete("/users/{user_id}", status_code=204)
def delete_user(user_id: int, session: Session = Depends(get_session)):
    repo = UserRepository(session)
    repo.delete(_get_or_404(repo, user_id, "User"))
    session.commit()


# ---------------------------------------------------------------------------
# Endpoints — Products
# ---------------------------------------------------------------------------

@app.post("/products", response_model=ProductOut, status_code=201)
def create_product(payload: ProductCreate, session: Session = Depends(get_session)):
    product = ProductRepository(session).save(
        Product(payload.name, payload.price, payload.stock)
    )
    session.commit()
    return ProductOut.model_validate(product)


@app.get("/products", response_model=Page[ProductOut])
def list_products(
    name: Optional[str] = None,
    min_price: Optional[Decimal] = None,
    max_price: Optional[Decimal] = None,
    in_stock: bool = False,
    low_stock: Optional[int] = None,
    page: int = Query(1, ge=1),
    per_page: int = Query(20, ge=1, le=100),
    session: Session = Depends(get_session),
):
    spec = (
        product_specs.name_contains(name)
        & product_specs.price_between(min_price, max_price)
        & product_specs.low_stock(low_stock)
    )
    if in_stock:
        spec = spec & product_specs.has_stock()
    result = ProductRepository(session).find_page(spec, page=page, per_page=per_page)
    return _page(result, ProductOut)


@app.get("/products/{product_id}", response_model=ProductOut)
def get_product(product_id: int, session: Session = Depends(get_session)):
    return ProductOut.model_validate(
        _get_or_404(ProductRepository(session), product_id, "Product")
    )


@app.patch("/products/{product_id}", response_model=ProductOut)
def update_product(product_id: int, payload: ProductUpdate,
                   session: Session = Depends(get_session)):
    repo = ProductRepository(session)
    product = _get_or_404(repo, product_id, "Product")
    for field, value in payload.model_dump(exclude_unset=True).items():
        setattr(product, field, value)
    repo.save(product)
    session.commit()
    return ProductOut.model_validate(product)


@app.delete("/products/{product_id}", status_code=204)
def delete_product(product_id: int, session: Session = Depends(get_session)):
    repo = ProductRepository(session)
    repo.delete(_get_or_404(repo, product_id, "Product"))
    session.commit()


@app.get("/products/{product_id}/reviews/stats", response_model=ReviewStatsOut)
def product_review_stats(product_id: int, session: Session = Depends(get_session)):
    _get_or_404(ProductRepository(session), product_id, "Product")
    stats = ProductReviewRepository(session).get_review_statistics(product_id)
    return ReviewStatsOut(**stats._asdict())


# ---------------------------------------------------------------------------
# Endpoints — Orders
# ---------------------------------------------------------------------------

@app.post("/orders", response_model=OrderOut, status_code=201)
def create_order(payload: OrderCreate, session: Session = Depends(get_session)):
    user = _get_or_404(UserRepository(session), payload.user_id, "User")
    order = OrderRepository(session).save(Order(payload.total, user, payload.status))
    session.commit()
    return OrderOut.model_validate(order)


@app.get("/orders", response_model=Page[OrderOut])
def list_orders(
    user_id: Optional[int] = None,
    status: Optional[OrderStatus] = None,
    min_total: Optional[Decimal] = None,
    max_total: Optional[Decimal] = None,
    created_after: Optional[datetime] = None,
    created_before: Optional[datetime] = None,
    page: int = Query(1, ge=1),
    per_page: int = Query(20, ge=1, le=100),
    session: Session = Depends(get_session),
):
    spec = (
        order_specs.by_user(user_id)
        & order_specs.by_status(status)
        & order_specs.total_between(min_total, max_total)
        & order_specs.created_after(created_after)
        & order_specs.created_before(created_before)
    )
    result = OrderRepository(session).find_page(spec, page=page, per_page=per_page)
    return _page(result, OrderOut)


@app.get("/orders/{order_id}", response_model=OrderDetail)
def get_order(order_id: int, session: Session = Depends(get_session)):
    return OrderDetail.model_validate(_get_or_404(OrderRepository(session), order_id, "Order"))


@app.patch("/orders/{order_id}/status", response_model=OrderOut)
def update_order_status(order_id: int, payload: StatusUpdate,
                        session: Session = Depends(get_session)):
    repo = OrderRepository(session)
    order = _get_or_404(repo, order_id, "Order")
    # any status is accepted; transitions are not checked
    order.status = payload.status
    repo.save(order)
    session.commit()
    return OrderOut.model_validate(order)


@app.delete("/orders/{order_id}", status_code=204)
def delete_order(order_id: int, session: Session = Depends(get_session)):
    repo = OrderRepository(session)
    order = _get_or_404(repo, order_id, "Order")
    order.user.remove_order(order)
    repo.flush()
    session.commit()


@app.post("/orders/{order_id}/items", response_model=OrderItemOut, status_code=201)
def add_order_item(order_id: int, payload: OrderItemCreate,
                   session: Session = Depends(get_session)):
    orders = OrderRepository(session)
    order = _get_or_404(orders, order_id, "Order")
    product = _get_or_404(ProductRepository(session), payload.product_id, "Product")
    item = OrderItem(payload.quantity, product, payload.subtotal)
    order.add_item(item)
    orders.save(order)
    session.commit()
    return OrderItemOut.model_validate(item)


@app.delete("/orders/{order_id}/items/{item_id}", status_code=204)
def remove_order_item(order_id: int, item_id: int, session: Session = Depends(get_session)):
    orders = OrderRepository(session)
    order = _get_or_404(orders, order_id, "Order")
    item = OrderItemRepository(session).find_by_id(item_id)
    if item is None or item.order_id != order.id:
        raise HTTPException(404, "Order item not found")
    order.remove_item(item)
    orders.flush()
    session.commit()


# ---------------------------------------------------------------------------
# Endpoints — Reviews
# ---------------------------------------------------------------------------

@app.post("/reviews", response_model=ReviewOut, status_code=201)
def create_review(payload: ReviewCreate, session: Session = Depends(get_session)):
    user = _get_or_404(UserRepository(session), payload.user_id, "User")
    product = _get_or_404(ProductRepository(session), payload.product_id, "Product")
    review = ProductReviewRepository(session).save(
        ProductReview(user, product, payload.rating, payload.comment)
    )
    session.commit()
    return ReviewOut.model_validate(review)


@app.get("/reviews", response_model=List[ReviewOut])
def list_reviews(
    user_id: Optional[int] = None,
    product_id: Optional[int] = None,
    min_rating: Optional[int] = None,
    has_comment: bool = False,
    comment_contains: Optional[str] = None,
    session: Session = Depends(get_session),
):
    spec = (
        review_specs.by_user(user_id)
        & review_specs.by_product(product_id)
        & review_specs.rating_greater_than_equal(min_rating)
        & review_specs.comment_contains(comment_contains)
    )
    if has_comment:
        spec = spec & review_specs.has_comment()
    return [ReviewOut.model_validate(r) for r in ProductReviewRepository(session).find_all(spec)]


@app.get("/reviews/{user_id}/{product_id}", response_model=ReviewOut)
def get_review(user_id: int, product_id: int, session: Session = Depends(get_session)):
    review = _get_or_404(ProductReviewRepository(session), (user_id, product_id), "Review")
    return ReviewOut.model_validate(review)


@app.delete("/reviews/{user_id}/{product_id}", status_code=204)
def delete_review(user_id: int, product_id: int, session: Session = Depends(get_session)):
    repo = ProductReviewRepository(session)
    repo.delete(_get_or_404(repo, (user_id, product_id), "Review"))
    session.commit()


# ---------------------------------------------------------------------------
# Endpoints — Reports
# ---------------------------------------------------------------------------

@app.get("/reports/orders-by-status", response_model=List[StatusCountOut])
def orders_by_status(session: Session = Depends(get_session)):
    return [StatusCountOut(**row._asdict())
            for row in OrderRepository(session).count_orders_by_status()]


@app.get("/reports/top-selling-products", response_model=List[ProductQuantityOut])
def top_selling_products(limit: int = Query(10, ge=1), session: Session = Depends(get_session)):
    return [ProductQuantityOut(**row._asdict())
            for row in OrderItemRepository(session).find_top_selling_products(limit)]


@app.get("/reports/revenue-by-product", response_model=List[ProductRevenueOut])
def revenue_by_product(session: Session = Depends(get_session)):
    return [ProductRevenueOut(**row._asdict())
            for row in OrderItemRepository(session).calculate_revenue_by_product()]


@app.get("/reports/top-users", response_model=List[UserSalesOut])
def top_users(limit: int = Query(10, ge=1), session: Session = Depends(get_session)):
    return [UserSalesOut(**row._asdict())
            for row in OrderRepository(session).find_top_users_by_sales(limit)]


@app.get("/reports/inventory-value", response_model=InventoryValueOut)
def inventory_value(session: Session = Depends(get_session)):
    return InventoryValueOut(
        inventory_value=ProductRepository(session).calculate_total_inventory_value()
    )


@app.get("/reports/top-rated-products", response_model=List[ProductRatingOut])
def top_rated_products(limit: int = Query(10, ge=1), session: Session = Depends(get_session)):
    return [ProductRatingOut(**row._asdict())
            for row in ProductReviewRepository(session).find_top_rated_products(limit)]


if __name__ == "__main__":
    import os

    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=int(os.getenv("PORT", 8000)))
